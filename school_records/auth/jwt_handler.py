import logging
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable

import jwt
from pydantic import ValidationError

from school_records.core import config
from school_records.core.clock import utcnow
from school_records.core.exceptions import InvalidToken
from school_records.models.user import Principal

logger = logging.getLogger(__name__)


class TokenCodec:
    """Issues and verifies signed, time-bounded identity tokens.

    Expiry is checked against the injected clock rather than PyJWT's own
    wall-clock check, so tests can move time forward.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, principal: Principal, ttl: timedelta | None = None) -> str:
        issued_at = self._clock()
        payload = principal.model_dump(mode="json", exclude_none=True)
        payload.update(
            {
                "iat": int(issued_at.timestamp()),
                "exp": int((issued_at + (ttl or self._ttl)).timestamp()),
            }
        )
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["iat", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected token: %s", exc)
            raise InvalidToken(str(exc)) from exc

        if not isinstance(payload["exp"], (int, float)) or self._clock().timestamp() >= payload["exp"]:
            logger.info("Rejected token: expired")
            raise InvalidToken("Signature has expired")

        try:
            return Principal.model_validate(payload)
        except ValidationError as exc:
            logger.info("Rejected token: malformed claims")
            raise InvalidToken("Malformed claims") from exc


@lru_cache
def get_token_codec() -> TokenCodec:
    return TokenCodec(
        secret=config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        ttl=timedelta(minutes=config.JWT_EXPIRES_MINUTES),
    )

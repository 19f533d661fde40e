from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from school_records.auth.jwt_handler import TokenCodec, get_token_codec
from school_records.core.exceptions import AuthenticationFailed, InvalidToken
from school_records.models.user import Principal

security = HTTPBearer(auto_error=False)


def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal | None:
    if credentials is None:
        return None
    try:
        return codec.verify(credentials.credentials)
    except InvalidToken as exc:
        raise AuthenticationFailed("Invalid token") from exc


def get_current_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise AuthenticationFailed("No token provided")
    return principal

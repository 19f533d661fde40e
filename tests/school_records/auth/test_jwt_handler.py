from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials

from school_records.auth.dependencies import get_current_principal, get_optional_principal
from school_records.auth.jwt_handler import TokenCodec
from school_records.core.exceptions import AuthenticationFailed, InvalidToken
from school_records.models.user import Principal, Role

SECRET = 'jwt-handler-test-secret-long-enough-for-hs256'
ISSUED_AT = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(ISSUED_AT)


@pytest.fixture
def simulated_codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec(SECRET, ttl=timedelta(hours=1), clock=clock)


def test_issue_then_verify_returns_the_same_identity(simulated_codec: TokenCodec) -> None:
    principal = Principal(id=3, email='student@example.com', role=Role.STUDENT, section='A')

    assert simulated_codec.verify(simulated_codec.issue(principal)) == principal


def test_token_carries_expected_claims(simulated_codec: TokenCodec) -> None:
    token = simulated_codec.issue(Principal(id=1, email='admin@example.com', role=Role.ADMIN))

    claims = jwt.decode(token, SECRET, algorithms=['HS256'], options={'verify_exp': False, 'verify_iat': False})

    assert claims == {
        'id': 1,
        'email': 'admin@example.com',
        'role': 'Admin',
        'iat': int(ISSUED_AT.timestamp()),
        'exp': int((ISSUED_AT + timedelta(hours=1)).timestamp()),
    }


def test_token_is_valid_until_just_before_expiry(simulated_codec: TokenCodec, clock: FakeClock) -> None:
    token = simulated_codec.issue(Principal(id=2, email='teacher@example.com', role=Role.TEACHER))

    clock.now = ISSUED_AT + timedelta(minutes=59, seconds=59)

    assert simulated_codec.verify(token).id == 2


def test_token_is_rejected_one_second_after_expiry(simulated_codec: TokenCodec, clock: FakeClock) -> None:
    token = simulated_codec.issue(Principal(id=2, email='teacher@example.com', role=Role.TEACHER))

    clock.now = ISSUED_AT + timedelta(hours=1, seconds=1)

    with pytest.raises(InvalidToken):
        simulated_codec.verify(token)


def test_token_signed_with_another_secret_is_rejected(simulated_codec: TokenCodec, clock: FakeClock) -> None:
    forged = TokenCodec('some-other-secret-that-is-also-long-enough', clock=clock).issue(
        Principal(id=1, email='admin@example.com', role=Role.ADMIN)
    )

    with pytest.raises(InvalidToken):
        simulated_codec.verify(forged)


@pytest.mark.parametrize('token', ['', 'not-a-token', 'a.b.c'])
def test_malformed_tokens_are_rejected(simulated_codec: TokenCodec, token: str) -> None:
    with pytest.raises(InvalidToken):
        simulated_codec.verify(token)


def test_tokens_missing_identity_claims_are_rejected(simulated_codec: TokenCodec) -> None:
    token = jwt.encode(
        {'iat': int(ISSUED_AT.timestamp()), 'exp': int((ISSUED_AT + timedelta(hours=1)).timestamp())},
        SECRET,
        algorithm='HS256',
    )

    with pytest.raises(InvalidToken):
        simulated_codec.verify(token)


def test_codec_requires_a_secret() -> None:
    with pytest.raises(ValueError):
        TokenCodec('')


def test_expired_and_tampered_tokens_fail_the_same_way(simulated_codec: TokenCodec, clock: FakeClock) -> None:
    token = simulated_codec.issue(Principal(id=2, email='teacher@example.com', role=Role.TEACHER))
    elevated = simulated_codec.issue(Principal(id=2, email='teacher@example.com', role=Role.ADMIN))
    header, _, signature = token.split('.')
    tampered = '.'.join([header, elevated.split('.')[1], signature])
    messages = []

    for candidate in (tampered, 'garbage'):
        with pytest.raises(AuthenticationFailed) as exception_info:
            get_optional_principal(
                credentials=HTTPAuthorizationCredentials(scheme='Bearer', credentials=candidate),
                codec=simulated_codec,
            )
        messages.append(exception_info.value.message)

    clock.now = ISSUED_AT + timedelta(hours=2)
    with pytest.raises(AuthenticationFailed) as exception_info:
        get_optional_principal(
            credentials=HTTPAuthorizationCredentials(scheme='Bearer', credentials=token),
            codec=simulated_codec,
        )
    messages.append(exception_info.value.message)

    assert messages == ['Invalid token', 'Invalid token', 'Invalid token']


def test_missing_credentials_require_a_token(simulated_codec: TokenCodec) -> None:
    assert get_optional_principal(credentials=None, codec=simulated_codec) is None

    with pytest.raises(AuthenticationFailed) as exception_info:
        get_current_principal(principal=None)

    assert exception_info.value.message == 'No token provided'

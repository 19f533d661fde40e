import pytest

from school_records.auth.jwt_handler import TokenCodec
from school_records.models.user import Principal, SignupRequest
from school_records.routes import auth_routes
from school_records.store import CollectionStore

TEST_SECRET = 'test-signing-secret-that-is-long-enough-for-hs256'


@pytest.fixture
def store(tmp_path) -> CollectionStore:
    return CollectionStore(str(tmp_path / 'data'))


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def register(store: CollectionStore, codec: TokenCodec):
    """Sign up an account through the auth handler and return its verified identity."""

    def _register(email: str, user_type: str, section: str | None = None) -> Principal:
        data = SignupRequest(email=email, password='password123', user_type=user_type, section=section)
        response = auth_routes.signup(data, store=store, codec=codec)
        return codec.verify(response.token)

    return _register

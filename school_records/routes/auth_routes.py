import logging

from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.jwt_handler import TokenCodec, get_token_codec
from school_records.auth.passwords import hash_password, verify_password
from school_records.auth.policy import Action, Resource, enforce
from school_records.core.exceptions import AuthenticationFailed, ValidationFailed
from school_records.models.user import (
    Principal,
    Role,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    normalize_email,
    users,
)
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)


def principal_from_record(record: dict) -> Principal:
    role = Role(record["userType"])
    return Principal(
        id=record["id"],
        email=record["email"],
        role=role,
        section=record.get("section") if role == Role.STUDENT else None,
    )


def find_account(store: CollectionStore, email: str) -> dict | None:
    wanted = normalize_email(email)
    return users(store).find_first(lambda record: normalize_email(record.get("email", "")) == wanted)


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignupRequest,
    store: CollectionStore = Depends(get_store),
    codec: TokenCodec = Depends(get_token_codec),
):
    enforce(None, Action.CREATE, Resource.ACCOUNTS)
    accounts = users(store)

    # Hold the collection lock so the uniqueness check and the insert are one step.
    with store.lock(accounts.key):
        if find_account(store, data.email) is not None:
            raise ValidationFailed("User already exists")

        fields = {
            "email": data.email,
            "password": hash_password(data.password),
            "userType": data.role.value,
        }
        if data.role == Role.STUDENT:
            fields["section"] = data.section
        record = accounts.create(fields)

    logger.info("Signed up %s account %d", data.role.value, record["id"])
    return TokenResponse(token=codec.issue(principal_from_record(record)))


@router.post("/signin", response_model=TokenResponse)
def signin(
    data: SigninRequest,
    store: CollectionStore = Depends(get_store),
    codec: TokenCodec = Depends(get_token_codec),
):
    record = find_account(store, data.email)
    if record is None or not verify_password(data.password, record.get("password", "")):
        logger.info("Failed sign-in attempt")
        raise AuthenticationFailed("Invalid credentials")

    return TokenResponse(token=codec.issue(principal_from_record(record)))


@router.get("/me", response_model=Principal)
def me(current_user: Principal = Depends(get_current_principal)):
    return current_user

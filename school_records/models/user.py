"""Account (identity) model definitions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'users'


class Role(str, Enum):
    """Roles used for authorization decisions."""

    ADMIN = 'Admin'
    TEACHER = 'Teacher'
    STUDENT = 'Student'


class Principal(BaseModel):
    """The verified identity carried by a session token."""

    id: int = Field(ge=1)
    email: str
    role: Role
    section: str | None = None


class SignupRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str | None = None
    password: str | None = None
    user_type: str | None = None
    section: str | None = None

    @model_validator(mode='after')
    def validate_account(self) -> 'SignupRequest':
        if not self.email or not self.password or not self.user_type:
            raise ValueError('Email, password, and userType are required')
        if self.user_type == Role.STUDENT.value and not (self.section or '').strip():
            raise ValueError('Section is required for Students')
        if self.user_type not in {role.value for role in Role}:
            raise ValueError('Invalid userType. Must be Admin, Teacher, or Student')

        self.email = self.email.strip()
        if self.user_type == Role.STUDENT.value:
            self.section = self.section.strip()
        else:
            self.section = None
        return self

    @property
    def role(self) -> Role:
        return Role(self.user_type)


class SigninRequest(BaseModel):
    email: str | None = None
    password: str | None = None

    @model_validator(mode='after')
    def validate_credentials(self) -> 'SigninRequest':
        if not self.email or not self.password:
            raise ValueError('Email and password are required')
        self.email = self.email.strip()
        return self


class TokenResponse(BaseModel):
    token: str


def normalize_email(email: str) -> str:
    return email.strip().casefold()


def users(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='User')

"""Request/response schemas for account endpoints and the internal account record."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Body for POST /auth/signup. Any caller-supplied role is ignored."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    confirm_password: str = Field(..., min_length=1, max_length=128, alias="confirmPassword")
    email: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., min_length=1, max_length=32, alias="phoneNumber")


class LoginRequest(BaseModel):
    """Credentials for POST /auth/signin."""

    email: str = Field(..., min_length=1, max_length=255, description="Email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class UpdateRequest(BaseModel):
    """Body for PUT /auth/{uuid}; omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, max_length=255)
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    confirm_password: str | None = Field(default=None, max_length=128, alias="confirmPassword")
    email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32, alias="phoneNumber")


class UserResponse(BaseModel):
    """
    Public profile view. Also the identity snapshot embedded in tokens.

    role is the lower-cased role code in tokens, the role display name in the
    all-users listing, and omitted (None) elsewhere.
    """

    model_config = ConfigDict(populate_by_name=True)

    uuid: UUID
    name: str
    username: str
    email: str
    role: str | None = None
    phone_number: str = Field(alias="phoneNumber")


class LoginResult(BaseModel):
    """Profile plus the 'Bearer <token>' string returned by a successful login."""

    user: UserResponse
    token: str


class RoleInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str


class Account(BaseModel):
    """Internal account record as returned by repositories. Never serialized to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    name: str
    username: str
    email: str
    phone_number: str
    password_hash: str
    role_id: int
    role: RoleInfo
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountCreate(BaseModel):
    """Fields the service hands to the repository for a new account (password already hashed)."""

    name: str
    username: str
    email: str
    phone_number: str
    password_hash: str
    role_id: int


class AccountUpdate(BaseModel):
    """Partial update; None leaves the stored value unchanged. role_id is always set."""

    name: str | None = None
    username: str | None = None
    email: str | None = None
    phone_number: str | None = None
    password_hash: str | None = None
    role_id: int

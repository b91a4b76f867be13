"""Request/response schemas for account endpoints (signup, signin, profile, reset, admin)."""

from datetime import datetime

from pydantic import BaseModel, Field

from portfolio.schemas.common import WireModel


class SignupRequest(BaseModel):
    """New account. Password complexity is checked by the route, not here."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, description="Login email")
    password: str = Field(..., description="Plain password")


class SigninRequest(BaseModel):
    """Credentials for signin."""

    email: str = Field(..., max_length=255, description="Login email")
    password: str = Field(..., description="Plain password")


class ProfileUpdateRequest(BaseModel):
    """Self-service profile changes; omitted or empty fields are left unchanged."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = None


class ForgetPasswordRequest(BaseModel):
    email: str = Field(..., max_length=255)


class ResetPasswordRequest(BaseModel):
    password: str
    token: str


class SessionResponse(WireModel):
    """Account identity plus a freshly issued bearer token."""

    id: int
    name: str
    email: str
    is_admin: bool = Field(..., alias="isAdmin")
    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")


class CurrentUser(WireModel):
    """Identity decoded from a bearer token, attached to the request by get_current_user."""

    id: int
    name: str
    email: str
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserOut(WireModel):
    """User as shown to admins (never includes password hash or reset token)."""

    id: int
    name: str
    email: str
    is_admin: bool = Field(..., alias="isAdmin")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class UserAdminUpdate(WireModel):
    """Admin edit of another account. isAdmin is always applied (absent means False)."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserUpdatedResponse(BaseModel):
    message: str
    user: UserOut


class UsersPageResponse(WireModel):
    """One page of users for the admin list."""

    users: list[UserOut]
    total_users: int = Field(..., alias="totalUsers")
    page: int
    pages: int

"""Pydantic request/response schemas."""

from portfolio.schemas.auth import (
    CurrentUser,
    ForgetPasswordRequest,
    ProfileUpdateRequest,
    ResetPasswordRequest,
    SessionResponse,
    SigninRequest,
    SignupRequest,
    UserAdminUpdate,
    UserOut,
    UsersPageResponse,
    UserUpdatedResponse,
)
from portfolio.schemas.common import MessageResponse
from portfolio.schemas.health import HealthResponse
from portfolio.schemas.message import (
    ContactRequest,
    MessageOut,
    MessagesPageResponse,
    ReplyRequest,
)
from portfolio.schemas.website import (
    WebsiteCreatedResponse,
    WebsiteOut,
    WebsitesPageResponse,
    WebsiteUpdate,
)

__all__ = [
    "ContactRequest",
    "CurrentUser",
    "ForgetPasswordRequest",
    "HealthResponse",
    "MessageOut",
    "MessageResponse",
    "MessagesPageResponse",
    "ProfileUpdateRequest",
    "ReplyRequest",
    "ResetPasswordRequest",
    "SessionResponse",
    "SigninRequest",
    "SignupRequest",
    "UserAdminUpdate",
    "UserOut",
    "UserUpdatedResponse",
    "UsersPageResponse",
    "WebsiteCreatedResponse",
    "WebsiteOut",
    "WebsitesPageResponse",
    "WebsiteUpdate",
]

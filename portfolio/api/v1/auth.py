"""Account endpoints (signup, signin, profile, password reset) and auth dependencies."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio.core.config import get_settings
from portfolio.core.database import get_db
from portfolio.core.security import (
    PASSWORD_POLICY_MESSAGE,
    TokenInvalidError,
    create_access_token,
    decode_token,
    hash_password,
    meets_password_policy,
    normalize_email,
    verify_password,
)
from portfolio.models import User
from portfolio.schemas.auth import (
    CurrentUser,
    ForgetPasswordRequest,
    ProfileUpdateRequest,
    ResetPasswordRequest,
    SessionResponse,
    SigninRequest,
    SignupRequest,
)
from portfolio.schemas.common import MessageResponse
from portfolio.services.mailer import MailDeliveryError, Mailer, get_mailer
from portfolio.services.password_reset import (
    RESET_DONE_MESSAGE,
    RESET_EMAIL_SENT_MESSAGE,
    AccountNotFoundError,
    PasswordPolicyError,
    ResetTokenNotFoundError,
    redeem_password_reset,
    request_password_reset,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_TAKEN_MESSAGE = "Email already registered"
ROOT_ADMIN_EMAIL_MESSAGE = "Can Not Change Admin User Email"
NAME_REQUIRED_MESSAGE = "Name is required"


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _validate_password(password: str | None) -> None:
    if not meets_password_policy(password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=PASSWORD_POLICY_MESSAGE,
        )


def guard_root_admin_email(current_email: str | None, new_email: str) -> None:
    """The root admin address can be neither given up nor taken by another account."""
    if new_email == current_email:
        return
    root_email = get_settings().ROOT_ADMIN_EMAIL
    if root_email in (current_email, new_email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ROOT_ADMIN_EMAIL_MESSAGE,
        )


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _commit_or_email_conflict(db: Session) -> None:
    """Commit; a unique-email race that slips past the pre-check becomes a 400."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMAIL_TAKEN_MESSAGE,
        ) from e


def _session_response(user: User) -> SessionResponse:
    return SessionResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=bool(user.is_admin),
        token=create_access_token(user),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.

    Claims are trusted as signed; the store is not consulted, so changes to
    name, email or admin flag show up only in tokens issued afterwards.
    """
    if credentials is None:
        raise _unauthenticated("No Token")
    try:
        claims = decode_token(credentials.credentials, purpose="access")
    except TokenInvalidError as e:
        raise _unauthenticated(e.message) from e
    try:
        return CurrentUser(
            id=int(claims["sub"]),
            name=claims.get("name") or "",
            email=claims.get("email") or "",
            is_admin=bool(claims.get("isAdmin")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise _unauthenticated("Invalid Token") from e


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated admin. Non-admins get 401, not 403."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Admin Token",
        )
    return current_user


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> SessionResponse:
    """Create an account and sign it in. The password must meet the complexity policy."""
    _validate_password(body.password)
    name = body.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=NAME_REQUIRED_MESSAGE,
        )

    email = normalize_email(body.email)
    guard_root_admin_email(None, email)
    if _email_taken(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMAIL_TAKEN_MESSAGE,
        )
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(body.password),
        is_admin=False,
    )
    db.add(user)
    _commit_or_email_conflict(db)
    db.refresh(user)
    logger.info("User signed up: user_id=%s", user.id)
    return _session_response(user)


@router.post("/signin", response_model=SessionResponse)
def signin(
    body: SigninRequest,
    db: Annotated[Session, Depends(get_db)],
) -> SessionResponse:
    """
    Authenticate with email and password; returns the account and a JWT.
    Unknown email and wrong password produce the same 401.
    """
    user = db.query(User).filter(User.email == normalize_email(body.email)).first()
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
        )
    return _session_response(user)


@router.put("/profile", response_model=SessionResponse)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionResponse:
    """Update own name, email and (optionally) password; returns a token with the new claims."""
    user = db.get(User, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if body.password:
        _validate_password(body.password)
    if body.name and body.name.strip():
        user.name = body.name.strip()
    if body.email and body.email.strip():
        email = normalize_email(body.email)
        guard_root_admin_email(user.email, email)
        if email != user.email and _email_taken(db, email, exclude_id=user.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=EMAIL_TAKEN_MESSAGE,
            )
        user.email = email
    if body.password:
        user.password_hash = hash_password(body.password)

    _commit_or_email_conflict(db)
    db.refresh(user)
    return _session_response(user)


@router.post("/forget-password", response_model=MessageResponse)
def forget_password(
    body: ForgetPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Email a reset link (valid for a few minutes) to the account with this email."""
    try:
        request_password_reset(db, body.email, mailer, get_settings())
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except MailDeliveryError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        ) from e
    return MessageResponse(message=RESET_EMAIL_SENT_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Set a new password with a reset token. Each token works once."""
    try:
        redeem_password_reset(db, body.token, body.password)
    except PasswordPolicyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except TokenInvalidError as e:
        raise _unauthenticated(e.message) from e
    except ResetTokenNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return MessageResponse(message=RESET_DONE_MESSAGE)

"""Password hashing, password policy, and JWT issuance/verification."""

import re
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Literal

import bcrypt
import jwt

from portfolio.core.config import settings

if TYPE_CHECKING:
    from portfolio.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# At least one digit, one lowercase, one uppercase, one non-alphanumeric, PASSWORD_MIN_LEN+ chars.
PASSWORD_POLICY = re.compile(
    rf"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z])(?=.*[^a-zA-Z\d]).{{{PASSWORD_MIN_LEN},}}$"
)
PASSWORD_POLICY_MESSAGE = "Password does not meet complexity requirements."

TokenPurpose = Literal["access", "reset"]


class TokenInvalidError(Exception):
    """Raised for any token that cannot be trusted: malformed, bad signature, expired, or wrong purpose."""

    def __init__(self, message: str = "Invalid Token", cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lower-cased without surrounding whitespace."""
    return email.strip().lower()


def meets_password_policy(password: str | None) -> bool:
    """True if the password satisfies the complexity policy (length and character classes)."""
    if not password or len(password) > PASSWORD_MAX_LEN:
        return False
    return PASSWORD_POLICY.fullmatch(password) is not None


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _encode(claims: dict[str, Any], purpose: TokenPurpose, ttl: timedelta) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        **claims,
        "purpose": purpose,
        # Unique per token so two tokens minted in the same second still differ.
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + ttl,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: "User", ttl: timedelta | None = None) -> str:
    """
    Create a session JWT carrying id, name, email and admin flag as of now.

    Claims are not refreshed until a new token is issued, so a role change
    only takes effect for tokens minted after it.
    """
    if ttl is None:
        ttl = timedelta(days=settings.JWT_EXPIRE_DAYS)
    claims = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "isAdmin": bool(user.is_admin),
    }
    return _encode(claims, "access", ttl)


def create_reset_token(user: "User", ttl: timedelta | None = None) -> str:
    """Create a short-lived password reset JWT for the given user."""
    if ttl is None:
        ttl = timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    return _encode({"sub": str(user.id)}, "reset", ttl)


def decode_token(token: str, purpose: TokenPurpose = "access") -> dict[str, Any]:
    """
    Decode and validate a JWT; return its claims.

    Raises TokenInvalidError on a malformed, tampered or expired token, or one
    minted for a different purpose. Callers cannot tell these cases apart.
    """
    if not token:
        raise TokenInvalidError()
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        raise TokenInvalidError(cause=e) from e
    if payload.get("purpose") != purpose:
        raise TokenInvalidError()
    return payload

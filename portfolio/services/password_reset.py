"""Password reset flow: mint and email a single-use reset token, then redeem it."""

import logging
from email.utils import formataddr
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from portfolio.core.security import (
    PASSWORD_POLICY_MESSAGE,
    create_reset_token,
    decode_token,
    hash_password,
    meets_password_policy,
    normalize_email,
)
from portfolio.models import User

if TYPE_CHECKING:
    from portfolio.core.config import Settings
    from portfolio.services.mailer import Mailer

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset Password"
RESET_EMAIL_SENT_MESSAGE = "We sent reset password link to your email."
RESET_DONE_MESSAGE = "Password reset successfully"


class PasswordPolicyError(Exception):
    """Raised when a new password fails the complexity policy."""

    def __init__(self, message: str = PASSWORD_POLICY_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class AccountNotFoundError(Exception):
    """Raised when no account matches the given email."""

    def __init__(self, message: str = "Email Not Found") -> None:
        self.message = message
        super().__init__(message)


class ResetTokenNotFoundError(Exception):
    """Raised when a valid reset token is not the one stored on any account (already used or superseded)."""

    def __init__(self, message: str = "User not found") -> None:
        self.message = message
        super().__init__(message)


def build_reset_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/reset-password/{token}"


def _reset_email_html(url: str, expire_minutes: int) -> str:
    return (
        "<p>Please click the following link to reset your password "
        f"(expires in {expire_minutes} minutes):</p>\n"
        f'<a href="{url}">Reset Password</a>'
    )


def request_password_reset(
    db: Session,
    email: str,
    mailer: "Mailer",
    settings: "Settings",
) -> str:
    """
    Issue a reset token for the account with this email and mail the reset link.

    The token is stored on the account before mailing, replacing any earlier
    one, so only the most recent link works. Returns the new token.

    Raises AccountNotFoundError if no account has this email, and lets
    MailDeliveryError propagate (the stored token stays valid in that case).
    """
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise AccountNotFoundError()

    token = create_reset_token(user)
    user.reset_token = token
    db.commit()
    logger.info("Password reset requested: user_id=%s", user.id)

    url = build_reset_url(settings.BASE_URL, token)
    mailer.send(
        formataddr((user.name, user.email)),
        RESET_EMAIL_SUBJECT,
        _reset_email_html(url, settings.RESET_TOKEN_EXPIRE_MINUTES),
    )
    return token


def redeem_password_reset(db: Session, token: str, new_password: str) -> None:
    """
    Set a new password using a reset token, consuming the token.

    Checks run in order: password policy (PasswordPolicyError), token
    signature and expiry (TokenInvalidError), then a single UPDATE that
    changes the hash and clears the token only where the stored token
    matches (ResetTokenNotFoundError when nothing matched).
    """
    if not meets_password_policy(new_password):
        raise PasswordPolicyError()

    claims = decode_token(token, purpose="reset")

    updated = (
        db.query(User)
        .filter(User.reset_token == token)
        .update(
            {User.password_hash: hash_password(new_password), User.reset_token: None},
            synchronize_session=False,
        )
    )
    db.commit()
    if updated == 0:
        raise ResetTokenNotFoundError()
    logger.info("Password reset redeemed: user_id=%s", claims.get("sub"))

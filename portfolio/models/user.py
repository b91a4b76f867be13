"""ORM model for user accounts (credentials, admin flag, reset token)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from portfolio.models.base import Base


class User(Base):
    """
    User account for JWT authentication and admin access control.

    email is stored lower-cased. reset_token holds at most one outstanding
    password reset JWT; issuing a new one overwrites it and redeeming clears it.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    reset_token = Column(String(1024), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

"""SQLAlchemy ORM models."""

from portfolio.models.base import Base
from portfolio.models.message import Message
from portfolio.models.user import User
from portfolio.models.website import Website

__all__ = ["Base", "Message", "User", "Website"]

"""ORM model for contact form messages."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from portfolio.models.base import Base


class Message(Base):
    """Message submitted through the public contact form."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Client-supplied timestamp string, kept verbatim.
    update_time = Column(String(64), nullable=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(512), nullable=False)
    message = Column(Text, nullable=False)
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

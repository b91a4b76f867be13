"""Request/response schemas for contact messages and admin replies."""

from datetime import datetime

from pydantic import BaseModel, Field

from portfolio.schemas.common import WireModel


class ContactRequest(WireModel):
    """Public contact form submission."""

    update_time: str | None = Field(default=None, max_length=64)
    full_name: str = Field(..., min_length=1, max_length=255, alias="fullName")
    email: str = Field(..., min_length=3, max_length=255)
    subject: str = Field(..., min_length=1, max_length=512)
    message: str = Field(..., min_length=1)


class MessageOut(WireModel):
    id: int
    update_time: str | None = None
    full_name: str = Field(..., alias="fullName")
    email: str
    subject: str
    message: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class MessagesPageResponse(WireModel):
    messages: list[MessageOut]
    total_messages: int = Field(..., alias="totalMessages")
    page: int
    pages: int


class ReplyRequest(WireModel):
    """Admin reply to a contact message, sent by email."""

    email: str = Field(..., min_length=3, max_length=255)
    subject: str = Field(..., min_length=1, max_length=512)
    reply_content: str = Field(..., min_length=1, alias="replyContent")

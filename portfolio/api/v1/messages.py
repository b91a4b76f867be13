"""Contact messages: public submission, admin review, deletion and email reply."""

import html
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from portfolio.api.v1.auth import require_admin
from portfolio.core.database import get_db
from portfolio.models import Message
from portfolio.schemas.auth import CurrentUser
from portfolio.schemas.common import MessageResponse
from portfolio.schemas.message import (
    ContactRequest,
    MessageOut,
    MessagesPageResponse,
    ReplyRequest,
)
from portfolio.services.mailer import MailDeliveryError, Mailer, get_mailer
from portfolio.services.pagination import paginate

router = APIRouter()

PAGE_SIZE = 12


def _reply_html(subject: str, reply_content: str) -> str:
    return (
        "<h1>Reply to Your Message</h1>\n"
        f"<p><strong>Subject:</strong> {html.escape(subject)}</p>\n"
        f"<p><strong>Message Reply:</strong> {html.escape(reply_content)}</p>\n"
        "<p>Thank you,</p>\n"
        "<p>profile.com</p>"
    )


@router.post("/contact", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def submit_contact(
    body: ContactRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageOut:
    """Store a contact form submission. No auth required."""
    message = Message(
        update_time=body.update_time,
        full_name=body.full_name,
        email=body.email.strip(),
        subject=body.subject,
        message=body.message,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return MessageOut.model_validate(message)


@router.get("", response_model=list[MessageOut])
def list_messages(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[MessageOut]:
    messages = db.query(Message).order_by(Message.id).all()
    return [MessageOut.model_validate(m) for m in messages]


@router.get("/admin", response_model=MessagesPageResponse)
def list_messages_page(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(alias="pageSize")] = PAGE_SIZE,
) -> MessagesPageResponse:
    result = paginate(db.query(Message).order_by(Message.id), page, page_size)
    return MessagesPageResponse(
        messages=[MessageOut.model_validate(m) for m in result.items],
        total_messages=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.delete("/{message_id:int}", response_model=MessageResponse)
def delete_message(
    message_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    message = db.get(Message, message_id)
    if message is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message Not Found")
    db.delete(message)
    db.commit()
    return MessageResponse(message="Message deleted successfully")


@router.post("/reply", response_model=MessageResponse)
def reply_to_message(
    body: ReplyRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Email a reply to the sender of a contact message."""
    try:
        mailer.send(
            body.email.strip(),
            f"Re: {body.subject}",
            _reply_html(body.subject, body.reply_content),
        )
    except MailDeliveryError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        ) from e
    return MessageResponse(message="Reply sent successfully")

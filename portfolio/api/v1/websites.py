"""Portfolio website endpoints: public browsing and admin editing."""

import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio.api.v1.auth import require_admin
from portfolio.core.database import get_db
from portfolio.models import Website
from portfolio.schemas.auth import CurrentUser
from portfolio.schemas.common import MessageResponse
from portfolio.schemas.website import (
    WebsiteCreatedResponse,
    WebsiteOut,
    WebsitesPageResponse,
    WebsiteUpdate,
)
from portfolio.services.pagination import paginate

router = APIRouter()

PAGE_SIZE = 10

# Placeholder values for a freshly created website; the admin edits them afterwards.
NEW_WEBSITE_DEFAULTS = {
    "image": "/images/",
    "language": "MERN Stack",
    "language_description": "MongoDB, Express, AngularJS, Node.js",
    "description": "description",
    "link": "https://www.domain.com",
}


def _get_website_or_404(db: Session, website_id: int) -> Website:
    website = db.get(Website, website_id)
    if website is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Website Not Found")
    return website


def _page_response(db: Session, page: int, page_size: int) -> WebsitesPageResponse:
    query = db.query(Website).order_by(Website.created_at.desc(), Website.id.desc())
    result = paginate(query, page, page_size)
    return WebsitesPageResponse(
        websites=[WebsiteOut.model_validate(w) for w in result.items],
        total_websites=result.total,
        page=result.page,
        pages=result.pages,
    )


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Website name or slug already exists",
        ) from e


@router.get("", response_model=list[WebsiteOut])
def list_websites(db: Annotated[Session, Depends(get_db)]) -> list[WebsiteOut]:
    websites = db.query(Website).order_by(Website.id).all()
    return [WebsiteOut.model_validate(w) for w in websites]


@router.post("", response_model=WebsiteCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_website(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> WebsiteCreatedResponse:
    """Create a placeholder website with a unique name/slug, to be edited next."""
    stamp = f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:6]}"
    website = Website(name=stamp, slug=stamp, **NEW_WEBSITE_DEFAULTS)
    db.add(website)
    _commit_or_conflict(db)
    db.refresh(website)
    return WebsiteCreatedResponse(
        message="Website Created", website=WebsiteOut.model_validate(website)
    )


@router.get("/admin", response_model=WebsitesPageResponse)
def list_websites_admin(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(alias="pageSize")] = PAGE_SIZE,
) -> WebsitesPageResponse:
    return _page_response(db, page, page_size)


@router.get("/search", response_model=WebsitesPageResponse)
def search_websites(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(alias="pageSize")] = PAGE_SIZE,
) -> WebsitesPageResponse:
    """Public paged listing, newest first."""
    return _page_response(db, page, page_size)


@router.get("/slug/{slug}", response_model=WebsiteOut)
def get_website_by_slug(slug: str, db: Annotated[Session, Depends(get_db)]) -> WebsiteOut:
    website = db.query(Website).filter(Website.slug == slug).first()
    if website is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Website Not Found")
    return WebsiteOut.model_validate(website)


@router.get("/{website_id:int}", response_model=WebsiteOut)
def get_website(website_id: int, db: Annotated[Session, Depends(get_db)]) -> WebsiteOut:
    return WebsiteOut.model_validate(_get_website_or_404(db, website_id))


@router.put("/{website_id:int}", response_model=MessageResponse)
def update_website(
    website_id: int,
    body: WebsiteUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    website = _get_website_or_404(db, website_id)
    for field, value in body.model_dump().items():
        setattr(website, field, value)
    _commit_or_conflict(db)
    return MessageResponse(message="Website Updated")


@router.delete("/{website_id:int}", response_model=MessageResponse)
def delete_website(
    website_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    website = _get_website_or_404(db, website_id)
    db.delete(website)
    db.commit()
    return MessageResponse(message="Website Deleted")

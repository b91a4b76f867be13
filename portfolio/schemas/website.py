"""Request/response schemas for portfolio websites."""

from datetime import datetime

from pydantic import BaseModel, Field

from portfolio.schemas.common import WireModel


class WebsiteOut(WireModel):
    id: int
    name: str
    slug: str
    image: str
    language: str
    language_description: str = Field(..., alias="languageDescription")
    description: str
    link: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class WebsiteUpdate(WireModel):
    """Full replacement of a website's editable fields."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    image: str = Field(..., min_length=1, max_length=1024)
    language: str = Field(..., min_length=1, max_length=255)
    language_description: str = Field(
        ..., min_length=1, max_length=1024, alias="languageDescription"
    )
    description: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1, max_length=2048)


class WebsiteCreatedResponse(BaseModel):
    message: str
    website: WebsiteOut


class WebsitesPageResponse(WireModel):
    """One page of websites (admin list and public search)."""

    websites: list[WebsiteOut]
    total_websites: int = Field(..., alias="totalWebsites")
    page: int
    pages: int

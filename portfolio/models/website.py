"""ORM model for portfolio websites."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from portfolio.models.base import Base


class Website(Base):
    """A portfolio item: a site with a preview image, stack label and external link."""

    __tablename__ = "websites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    image = Column(String(1024), nullable=False)
    language = Column(String(255), nullable=False)
    language_description = Column(String(1024), nullable=False)
    description = Column(Text, nullable=False)
    link = Column(String(2048), nullable=False)
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

"""Skip/limit pagination over SQLAlchemy queries."""

import math
from typing import Any, NamedTuple

from sqlalchemy.orm import Query

# Upper bounds keep OFFSET/LIMIT within what the database driver can bind.
MAX_PAGE = 1_000_000
MAX_PAGE_SIZE = 100


class Page(NamedTuple):
    items: list[Any]
    total: int
    page: int
    pages: int


def paginate(query: Query, page: int, page_size: int) -> Page:
    """
    Return the 1-based page of query with the overall count.

    page is clamped to [1, MAX_PAGE] and page_size to [1, MAX_PAGE_SIZE].
    pages is 0 for an empty result.
    """
    page = min(max(page, 1), MAX_PAGE)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    total = query.order_by(None).count()
    items = query.offset(page_size * (page - 1)).limit(page_size).all()
    return Page(items=items, total=total, page=page, pages=math.ceil(total / page_size))

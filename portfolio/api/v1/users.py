"""Admin user management: list, inspect, edit and delete accounts."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio.api.v1.auth import EMAIL_TAKEN_MESSAGE, guard_root_admin_email, require_admin
from portfolio.core.config import get_settings
from portfolio.core.database import get_db
from portfolio.core.security import normalize_email
from portfolio.models import User
from portfolio.schemas.auth import (
    CurrentUser,
    UserAdminUpdate,
    UserOut,
    UsersPageResponse,
    UserUpdatedResponse,
)
from portfolio.schemas.common import MessageResponse
from portfolio.services.pagination import paginate

logger = logging.getLogger(__name__)
router = APIRouter()

PAGE_SIZE = 12


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User Not Found")
    return user


@router.get("", response_model=list[UserOut])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    """List all users (admin only)."""
    users = db.query(User).order_by(User.id).all()
    return [UserOut.model_validate(u) for u in users]


@router.get("/admin", response_model=UsersPageResponse)
def list_users_page(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(alias="pageSize")] = PAGE_SIZE,
) -> UsersPageResponse:
    """One page of users for the admin table."""
    result = paginate(db.query(User).order_by(User.id), page, page_size)
    return UsersPageResponse(
        users=[UserOut.model_validate(u) for u in result.items],
        total_users=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.get("/{user_id:int}", response_model=UserOut)
def get_user(
    user_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.model_validate(_get_user_or_404(db, user_id))


@router.put("/{user_id:int}", response_model=UserUpdatedResponse)
def update_user(
    user_id: int,
    body: UserAdminUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdatedResponse:
    """
    Edit name, email and admin flag. Omitted name/email are kept; isAdmin is
    always written. Tokens already issued to the user keep their old claims.
    """
    user = _get_user_or_404(db, user_id)
    if user.email == get_settings().ROOT_ADMIN_EMAIL and not body.is_admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Can Not Demote Admin User",
        )
    if body.email and body.email.strip():
        email = normalize_email(body.email)
        guard_root_admin_email(user.email, email)
        user.email = email
    if body.name and body.name.strip():
        user.name = body.name.strip()
    user.is_admin = body.is_admin
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMAIL_TAKEN_MESSAGE,
        ) from e
    db.refresh(user)
    return UserUpdatedResponse(message="User Updated", user=UserOut.model_validate(user))


@router.delete("/{user_id:int}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete an account. The root admin account can never be deleted."""
    user = _get_user_or_404(db, user_id)
    if user.email == get_settings().ROOT_ADMIN_EMAIL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Can Not Delete Admin User",
        )
    db.delete(user)
    db.commit()
    logger.info("User deleted: user_id=%s by admin_id=%s", user_id, admin.id)
    return MessageResponse(message="User Deleted")

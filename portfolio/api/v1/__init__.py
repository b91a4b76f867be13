"""API routes."""

from fastapi import APIRouter

from portfolio.api.v1 import auth, health, messages, users, websites

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
# Account routes first so /users/profile is never taken for a user id.
router.include_router(auth.router, prefix="/users", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(websites.router, prefix="/website", tags=["websites"])

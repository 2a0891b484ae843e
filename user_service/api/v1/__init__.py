"""API v1 routes."""

from fastapi import APIRouter

from user_service.api.v1 import auth, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/auth", tags=["users"])

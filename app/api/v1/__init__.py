"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, health, password_reset

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(password_reset.router, prefix="/auth/password-reset", tags=["auth"])

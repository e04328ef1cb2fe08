"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProjectItem,
    ProjectSelectRequest,
    ProjectsResponse,
    ResetTokenStatus,
    SessionContext,
)
from app.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "ProjectItem",
    "ProjectSelectRequest",
    "ProjectsResponse",
    "ResetTokenStatus",
    "SessionContext",
]

"""Dependency wiring: services built per request from the injected DB session."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, get_settings
from app.core.database import get_db, get_session_factory
from app.services.audit import AuditTrail
from app.services.auth import AuthService
from app.services.mailer import Mailer, get_mailer
from app.services.password_reset import PasswordResetService


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_audit_trail(
    session_factory: Annotated[sessionmaker, Depends(get_session_factory)],
) -> AuditTrail:
    return AuditTrail(session_factory)


def get_app_mailer(settings: Annotated[Settings, Depends(get_settings)]) -> Mailer:
    return get_mailer(settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    audit: Annotated[AuditTrail, Depends(get_audit_trail)],
) -> AuthService:
    return AuthService(db, settings, audit=audit)


def get_password_reset_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    mailer: Annotated[Mailer, Depends(get_app_mailer)],
    audit: Annotated[AuditTrail, Depends(get_audit_trail)],
) -> PasswordResetService:
    return PasswordResetService(db, settings, mailer, audit=audit)

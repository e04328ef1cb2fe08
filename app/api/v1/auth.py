"""Login, logout, session and project selection endpoints plus the session dependencies."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.v1.deps import client_ip, get_auth_service
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import create_session_token, decode_session_token
from app.repositories import ProjectRepository, UserRepository
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProjectItem,
    ProjectSelectRequest,
    ProjectsResponse,
    SessionContext,
)
from app.services.auth import AuthService
from app.services.errors import (
    AccountLockedError,
    InputValidationError,
    InvalidCredentialsError,
)
from app.services.remember_tokens import RememberTokenIssuer

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _set_session_cookie(response: Response, context: SessionContext) -> None:
    settings = get_settings()
    token = create_session_token(
        user_id=context.user_id,
        name=context.name,
        role=context.role,
        project_id=context.project_id,
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def _set_remember_cookie(response: Response, user_id: int, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.REMEMBER_COOKIE_NAME,
        value=RememberTokenIssuer.cookie_value(user_id, token),
        max_age=settings.REMEMBER_TOKEN_DAYS * 86400,
        path="/",
        httponly=True,
        secure=True,
        samesite="strict",
    )


def _session_from_token(token: str, db: Session) -> SessionContext | None:
    try:
        payload = decode_session_token(token)
    except jwt.PyJWTError:
        return None
    if payload.get("authenticated") is not True:
        return None
    try:
        user_id = int(payload.get("sub"))
        project_id = int(payload.get("project_id"))
    except (TypeError, ValueError):
        return None
    if user_id <= 0:
        return None
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        return None
    return SessionContext(
        user_id=user.id,
        name=user.name,
        role=user.role,
        project_id=project_id,
    )


def get_optional_session(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionContext | None:
    """Dependency: session context from the session cookie or a Bearer token, or None."""
    token = request.cookies.get(get_settings().SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        return None
    return _session_from_token(token, db)


def get_current_session(
    context: Annotated[SessionContext | None, Depends(get_optional_session)],
) -> SessionContext:
    """Dependency: require an authenticated session. Raises 401 if missing or invalid."""
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


@router.get("/projects", response_model=ProjectsResponse)
def list_projects(db: Annotated[Session, Depends(get_db)]) -> ProjectsResponse:
    """Active projects for the login form's project dropdown."""
    projects = ProjectRepository(db).list_active()
    return ProjectsResponse(projects=[ProjectItem.model_validate(p) for p in projects])


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """
    Authenticate with username, password and project; sets the session cookie
    and, when remember_me is true, the 30-day remember cookie.
    """
    try:
        result = service.login(
            username=body.username,
            password=body.password,
            project_id=body.project_id,
            remember_me=body.remember_me,
            ip_address=client_ip(request),
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    except AccountLockedError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=e.message,
            headers={"Retry-After": str(e.retry_after)},
        ) from e
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    _set_session_cookie(response, result.context)
    if result.remember_token:
        _set_remember_cookie(response, result.user.id, result.remember_token)
    return LoginResponse(user=result.context, remembered=result.remember_token is not None)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    context: Annotated[SessionContext | None, Depends(get_optional_session)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """End the session: revoke the remember token and clear both cookies."""
    service.logout(context, ip_address=client_ip(request))
    settings = get_settings()
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    response.delete_cookie(settings.REMEMBER_COOKIE_NAME, path="/")
    return MessageResponse(message="You have been logged out.")


@router.get("/me", response_model=SessionContext)
def me(context: Annotated[SessionContext, Depends(get_current_session)]) -> SessionContext:
    return context


@router.post("/project", response_model=SessionContext)
def select_project(
    body: ProjectSelectRequest,
    request: Request,
    response: Response,
    context: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> SessionContext:
    """Switch the current session to another active project."""
    try:
        updated = service.select_project(context, body.project_id, ip_address=client_ip(request))
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    _set_session_cookie(response, updated)
    return updated

"""Health check endpoint with database connectivity and mail transport status."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Used by load balancers and monitoring; never fails on a down database."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        version=request.app.version,
        database="connected" if check_db_connected(db) else "disconnected",
        mail_backend=settings.MAIL_BACKEND,
    )

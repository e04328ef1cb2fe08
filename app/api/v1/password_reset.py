"""Password reset endpoints: request a reset link, check a token, set a new password."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.api.v1.deps import client_ip, get_password_reset_service
from app.schemas.auth import (
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    ResetTokenStatus,
)
from app.services.errors import (
    ExpiredResetTokenError,
    InputValidationError,
    InvalidResetTokenError,
    MailDispatchError,
    WeakPasswordError,
)
from app.services.password_reset import PasswordResetService

router = APIRouter()


@router.post("", response_model=MessageResponse)
def request_password_reset(
    body: PasswordResetRequest,
    request: Request,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    """Email a reset link when the address is known. The reply does not reveal whether it is."""
    try:
        message = service.request_reset(body.email, ip_address=client_ip(request))
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    except MailDispatchError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    return MessageResponse(message=message)


@router.get("/validate", response_model=ResetTokenStatus)
def validate_reset_token(
    request: Request,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
    token: Annotated[str, Query(max_length=128)] = "",
) -> ResetTokenStatus:
    """Check a reset link before showing the new-password form."""
    try:
        user = service.validate_token(token, ip_address=client_ip(request))
    except (InvalidResetTokenError, ExpiredResetTokenError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return ResetTokenStatus(valid=True, name=user.name)


@router.post("/confirm", response_model=MessageResponse)
def confirm_password_reset(
    body: PasswordResetConfirm,
    request: Request,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    """Set a new password with a live reset token; the token is consumed."""
    try:
        message = service.confirm_reset(
            body.token,
            body.password,
            body.confirm_password,
            ip_address=client_ip(request),
        )
    except (InvalidResetTokenError, ExpiredResetTokenError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except WeakPasswordError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    return MessageResponse(message=message)

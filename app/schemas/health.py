"""Health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the service was started with")
    version: str = Field(description="Service version")
    database: Literal["connected", "disconnected"] | None = None
    mail_backend: Literal["smtp", "console"] = Field(description="Transport used for reset emails")

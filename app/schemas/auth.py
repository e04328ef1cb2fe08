"""Request/response schemas for auth, session and password reset endpoints."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """
    Login form. Fields are coerced rather than checked here: blank, missing or
    malformed values reach the service, which rejects them with one generic message.
    """

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")
    project_id: int | None = Field(default=None, description="Project to open after login")
    remember_me: bool = Field(default=False, description="Issue a 30-day remember cookie")

    @field_validator("username", "password", mode="before")
    @classmethod
    def non_string_as_blank(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("project_id", mode="before")
    @classmethod
    def unparsable_project_as_none(cls, v: Any) -> int | None:
        # An unselected dropdown posts "".
        if isinstance(v, str) and v.strip().lstrip("-").isdigit():
            v = int(v)
        if isinstance(v, bool) or not isinstance(v, int):
            return None
        # Out of range for an INTEGER primary key.
        return v if abs(v) < 2**31 else None

    @field_validator("remember_me", mode="before")
    @classmethod
    def truthy_remember_me(cls, v: Any) -> bool:
        return v in (True, 1, "1", "true", "on", "yes")


class SessionContext(BaseModel):
    """Authenticated session state, passed explicitly to handlers."""

    user_id: int
    name: str
    role: str
    project_id: int
    authenticated: bool = True


class LoginResponse(BaseModel):
    """Returned after a successful login; cookies carry the session itself."""

    user: SessionContext
    remembered: bool = Field(default=False, description="True when a remember cookie was set")


class ProjectSelectRequest(BaseModel):
    project_id: int = Field(default=0, description="Active project to switch to")


class ProjectItem(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProjectsResponse(BaseModel):
    """Active projects for the login dropdown."""

    projects: list[ProjectItem]


class PasswordResetRequest(BaseModel):
    email: str = Field(default="", max_length=100, description="Account email address")


class PasswordResetConfirm(BaseModel):
    token: str = Field(default="", max_length=128)
    password: str = Field(default="", max_length=256)
    confirm_password: str = Field(default="", max_length=256)


class ResetTokenStatus(BaseModel):
    valid: bool
    name: str | None = None


class MessageResponse(BaseModel):
    message: str

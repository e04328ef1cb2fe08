"""Domain errors raised by the auth services and translated to HTTP responses by the API layer."""

VALIDATION_MESSAGE = "Please enter username, password, and select a project."
LOCKED_MESSAGE = (
    "Too many failed login attempts. Please try again after 15 minutes or reset your password."
)
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."
MAIL_FAILURE_MESSAGE = "Could not send password reset email. Please contact support."
INVALID_RESET_TOKEN_MESSAGE = (
    "Invalid password reset token. Please check your email or request a new link."
)
EXPIRED_RESET_TOKEN_MESSAGE = "This password reset link has expired. Please request a new one."


class AuthError(Exception):
    """Base class for authentication errors; message is safe to show to the user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(AuthError):
    """Raised when a required field (username, password, project, email) is missing or invalid."""

    def __init__(self, message: str = VALIDATION_MESSAGE) -> None:
        super().__init__(message)


class AccountLockedError(AuthError):
    """Raised when the username has too many recent failures; credentials are not checked."""

    def __init__(self, message: str = LOCKED_MESSAGE, retry_after: int = 0) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised for an unknown username or a wrong password."""

    def __init__(self, message: str = INVALID_CREDENTIALS_MESSAGE) -> None:
        super().__init__(message)


class MailDispatchError(AuthError):
    """Raised when the mail transport fails to accept a message."""

    def __init__(self, message: str = MAIL_FAILURE_MESSAGE, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class InvalidResetTokenError(AuthError):
    def __init__(self, message: str = INVALID_RESET_TOKEN_MESSAGE) -> None:
        super().__init__(message)


class ExpiredResetTokenError(AuthError):
    def __init__(self, message: str = EXPIRED_RESET_TOKEN_MESSAGE) -> None:
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a new password is missing, mismatched or breaks the password policy."""

"""Password hashing, opaque tokens and the signed session token."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
# bcrypt only reads the first 72 bytes; longer passwords are refused, never truncated.
PASSWORD_MAX_BYTES = 72

# Random bytes behind remember and reset tokens (hex-encoded to twice the length).
TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Raises ValueError above PASSWORD_MAX_BYTES."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password longer than {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Over-long input never matches."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_token() -> str:
    """Return a new opaque token: TOKEN_BYTES random bytes, hex-encoded."""
    return secrets.token_hex(TOKEN_BYTES)


def password_policy_error(password: str) -> str | None:
    """Return a user-facing message when password breaks the policy, else None."""
    if len(password) < PASSWORD_MIN_LEN:
        return f"Password must be at least {PASSWORD_MIN_LEN} characters long."
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password must be at most {PASSWORD_MAX_BYTES} characters long."
    if not any(c.isupper() for c in password):
        return "Password must contain at least one uppercase letter."
    if not any(c.islower() for c in password):
        return "Password must contain at least one lowercase letter."
    if not any(c.isdigit() for c in password):
        return "Password must contain at least one number."
    return None


def create_session_token(
    user_id: int,
    name: str,
    role: str,
    project_id: int,
) -> str:
    """Create the signed session token carried by the session cookie."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "name": name,
        "role": role,
        "project_id": project_id,
        "authenticated": True,
        "exp": expire,
        "iat": now,
    }
    secret = settings.SESSION_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.SESSION_ALGORITHM,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return its payload.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.SESSION_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.SESSION_ALGORITHM],
    )

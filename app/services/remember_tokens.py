"""Remember-me token issuance: one opaque, 30-day token per user."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from app.core.clock import utcnow
from app.core.security import generate_token
from app.repositories import RememberTokenRepository

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=30)


class RememberTokenIssuer:
    def __init__(
        self,
        tokens: RememberTokenRepository,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.tokens = tokens
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: int) -> str:
        """Replace the user's remember token with a fresh one and return it."""
        token = generate_token()
        expires_at = self.clock() + self.ttl
        self.tokens.replace_for_user(user_id, token, expires_at)
        logger.debug("Remember token issued for user_id=%s", user_id)
        return token

    def revoke(self, user_id: int) -> None:
        self.tokens.delete_for_user(user_id)

    @staticmethod
    def cookie_value(user_id: int, token: str) -> str:
        """Value stored in the remember cookie: 'user_id:token'."""
        return f"{user_id}:{token}"

"""Login attempt tracker: counts recent failures per username to drive lockout."""

from collections.abc import Callable
from datetime import datetime, timedelta

from app.core.clock import as_utc, utcnow
from app.repositories import LoginAttemptRepository

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_WINDOW = timedelta(minutes=15)


class LoginAttemptTracker:
    """
    Lockout is evaluated at query time only: a username is locked while at least
    max_attempts failures fall inside the trailing window. Nothing is reset on
    success; old rows simply age out of the window.
    """

    def __init__(
        self,
        attempts: LoginAttemptRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window: timedelta = DEFAULT_WINDOW,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.attempts = attempts
        self.max_attempts = max_attempts
        self.window = window
        self.clock = clock

    def is_locked(self, username: str) -> bool:
        since = self.clock() - self.window
        return self.attempts.count_since(username, since) >= self.max_attempts

    def record_failure(self, username: str, ip_address: str) -> None:
        self.attempts.add(username, ip_address, self.clock())

    def seconds_until_unlock(self, username: str) -> int:
        """Seconds until the oldest counted failure leaves the window; 0 when not locked."""
        now = self.clock()
        times = self.attempts.times_since(username, now - self.window)
        if len(times) < self.max_attempts:
            return 0
        # Unlocks once enough of the oldest failures age out to drop below max_attempts.
        pivot = times[len(times) - self.max_attempts]
        remaining = (as_utc(pivot) + self.window - now).total_seconds()
        return max(0, int(remaining))

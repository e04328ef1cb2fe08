"""Test environment: settings come from env vars, so set them before any app import."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret-0123456789abcdef"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["MAIL_BACKEND"] = "console"
os.environ["RESET_URL_BASE"] = "https://dabs.test/reset_password.php"

from app.core import security  # noqa: E402

# Cheap hashes keep the suite fast; verification works for any cost.
security.BCRYPT_ROUNDS = 4

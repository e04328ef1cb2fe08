"""
CLI entrypoint for the data retention job. Run from cron, e.g.:

  python -m app.retention

Or hourly: 0 * * * * cd /path/to/dabs-auth && .venv/bin/python -m app.retention
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.retention import run_retention

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: purge stale login attempts and expired tokens."""
    settings = get_settings()
    db = SessionLocal()
    try:
        result = run_retention(db, settings)
        logger.info(
            "Retention completed: attempts_deleted=%s remember_tokens_deleted=%s "
            "reset_tokens_deleted=%s",
            result.attempts_deleted,
            result.remember_tokens_deleted,
            result.reset_tokens_deleted,
        )
        return 0
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

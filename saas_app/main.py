"""
SaaS App: Bootstrap Entrypoint

Configures structlog, opens the process-wide database handle, verifies the
connection, seeds the default email templates, and shuts down cleanly.
The web layer calls the same init_db()/close_db() pair from its own startup
and shutdown hooks.

Run via:
    python -m saas_app.main
"""

from __future__ import annotations

import asyncio
import logging
import sys

import structlog

from saas_app.accounts.email_templates import insert_default_templates
from saas_app.config import settings
from saas_app.db import check_connection, close_db, get_session_factory, init_db


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    # Configure stdlib logging first (for third-party libraries)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application Startup
# ---------------------------------------------------------------------------


async def main() -> None:
    """
    Execution order:
    1. Configure logging (structlog JSON)
    2. Create the async engine and session factory
    3. Verify the database connection
    4. Seed default email templates
    5. Dispose the engine
    """
    configure_logging(log_level=settings.LOG_LEVEL)
    logger = structlog.get_logger(__name__)

    logger.info("saas_app_bootstrap_begin")

    if not settings.EMAIL_SUPPORT_FROM_ADDRESS:
        logger.warning("config_email_from_address_missing", note="welcome emails disabled")
    if not settings.MAILCHIMP_API_KEY:
        logger.warning("config_mailchimp_api_key_missing", note="mailing-list registration disabled")

    await init_db()
    try:
        await check_connection()
        logger.info("database_health_check_passed")

        async with get_session_factory()() as session:
            inserted = await insert_default_templates(session)
        logger.info("saas_app_bootstrap_complete", templates_inserted=inserted)
    except Exception as e:
        logger.error(
            "saas_app_bootstrap_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

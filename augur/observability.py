"""Logfire tracing for research runs."""

import logging

import logfire

from augur import __version__
from augur.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """Send traces and log records to Logfire when a token is configured.

    Call once at startup, before the first research run. Model turns are
    traced through the pydantic-ai integration and collaborator HTTP calls
    through the httpx one. Returns whether tracing was enabled.
    """
    if not settings.logfire_token:
        logger.warning("LOGFIRE_TOKEN not set, tracing stays local")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="augur",
            service_version=__version__,
            send_to_logfire="if-token-present",
        )
        logfire.instrument_pydantic_ai()
        logfire.instrument_httpx()
        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())
    except Exception as e:
        logger.warning(f"Logfire setup failed, continuing without tracing: {e}")
        return False

    logger.info(f"Logfire tracing enabled for augur {__version__}")
    return True

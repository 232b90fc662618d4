"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mixerdeck.utils.structlog_configurator import configure_structlog
from mixerdeck.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and report which audio tools are in use.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    logger.info(
        "MixerDeck starting: svcl=%s getnir=%s default_device=%s",
        config.svcl_path,
        config.getnir_path,
        config.default_device,
    )
    try:
        yield
    finally:
        logger.info("MixerDeck shutting down")

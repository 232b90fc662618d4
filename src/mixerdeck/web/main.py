"""MixerDeck web application entry point."""

import logging

from mixerdeck.config import ConfigManager
from mixerdeck.utils.structlog_configurator import configure_structlog
from mixerdeck.web.core.factory import create_app

# Configure logging before anything else imports and creates loggers
config_manager = ConfigManager()
config = config_manager.load()
configure_structlog(config)

# Request logging middleware replaces the uvicorn access log
logging.getLogger("uvicorn.access").disabled = True
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

app = create_app()

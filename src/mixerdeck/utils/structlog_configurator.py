"""Structlog-based logging configuration for MixerDeck.

Supports two output styles:
- Development: human-readable console output
- Service: JSON lines on stdout, suitable for log collectors
"""

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import structlog

from mixerdeck.config.models import MixerDeckConfig


def is_development_environment() -> bool:
    """Check whether MIXERDECK_ENV selects development mode."""
    return os.environ.get("MIXERDECK_ENV", "production") == "development"


def get_package_version() -> str:
    """Get the installed MixerDeck version for log context."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("mixerdeck")
    except PackageNotFoundError:
        return "unknown"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json_output(config: MixerDeckConfig, is_development: bool) -> bool:
    """Decide between JSON and console rendering."""
    if config.logging.json_logs is not None:
        return config.logging.json_logs
    if is_development:
        return os.environ.get("MIXERDECK_JSON_LOGS", "false").lower() == "true"
    return True


def _configure_processors(config: MixerDeckConfig, is_development: bool) -> list:
    """Configure structlog processors based on environment."""
    extra_fields = {
        "service": "mixerdeck",
        "version": get_package_version(),
        **config.logging.extra_fields,  # Allow config to override/add fields
    }

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json_output(config, is_development):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def _configure_handlers(config: MixerDeckConfig) -> None:
    """Route stdlib logging through a single stdout handler."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def configure_structlog(config: MixerDeckConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The MixerDeckConfig instance containing logging settings.
    """
    is_development = is_development_environment()
    processors = _configure_processors(config, is_development)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.logging.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_handlers(config)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        version=get_package_version(),
        log_level=config.logging.level,
        development=is_development,
        json_output=_use_json_output(config, is_development),
    )

"""MixerDeck configuration package.

This package provides centralized configuration management with
validation, defaults, and YAML parsing and serialization.
"""

from .manager import ConfigManager
from .models import LoggingConfig, MixerDeckConfig

__all__ = [
    "ConfigManager",
    "LoggingConfig",
    "MixerDeckConfig",
]

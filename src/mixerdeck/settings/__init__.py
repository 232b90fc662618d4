"""User settings persistence."""

from mixerdeck.settings.models import Settings
from mixerdeck.settings.service import SettingsService

__all__ = [
    "Settings",
    "SettingsService",
]

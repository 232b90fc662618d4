"""Persistence of the user settings record."""

import logging
from typing import Any

import yaml

from mixerdeck.settings.models import Settings
from mixerdeck.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class SettingsService:
    """Loads and updates the settings record stored as YAML.

    Saves are last-write-wins; there is no merge with concurrent writers.
    """

    def __init__(self, path_resolver: PathResolver | None = None):
        self.path_resolver = path_resolver or PathResolver()
        self.settings_path = self.path_resolver.get_settings_path()

    def load(self) -> Settings:
        """Load settings, returning defaults when nothing has been saved yet."""
        if not self.settings_path.exists():
            return Settings()

        raw_settings = yaml.safe_load(self.settings_path.read_text()) or {}
        if not isinstance(raw_settings, dict):
            raise ValueError(f"Settings file {self.settings_path} does not contain a mapping")
        return Settings.model_validate(raw_settings)

    def update(self, updates: dict[str, Any]) -> Settings:
        """Merge ``updates`` into the stored settings and save the result.

        Args:
            updates: Partial settings keyed by wire (camelCase) or field name.

        Returns:
            The settings as saved.
        """
        current = self.load().model_dump(by_alias=True)
        merged = Settings.model_validate({**current, **self._to_aliases(updates)})
        self.save(merged)
        return merged

    def save(self, settings: Settings) -> None:
        """Write the settings record to disk."""
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_yaml = yaml.safe_dump(
            settings.model_dump(by_alias=True), default_flow_style=False, sort_keys=False
        )
        self.settings_path.write_text(settings_yaml)
        logger.info("Settings saved to %s", self.settings_path)

    @staticmethod
    def _to_aliases(updates: dict[str, Any]) -> dict[str, Any]:
        """Rename declared fields given by field name to their wire alias."""
        aliases = {name: field.alias for name, field in Settings.model_fields.items()}
        return {aliases.get(key) or key: value for key, value in updates.items()}

"""Configuration management backed by a YAML file."""

import logging
import shutil
from typing import Any

import yaml

from mixerdeck.config.models import LoggingConfig, MixerDeckConfig
from mixerdeck.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading and saving."""

    CURRENT_VERSION = "1.0.0"

    def __init__(self, path_resolver: PathResolver | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = self.path_resolver.get_config_path()

    def load(self) -> MixerDeckConfig:
        """Load configuration, creating the file from defaults when missing.

        Returns:
            MixerDeckConfig: Loaded and validated configuration
        """
        self._ensure_config_exists()
        raw_config = self._read_yaml()
        raw_config.setdefault("config_version", self.CURRENT_VERSION)
        config = self._create_config_object(raw_config)
        return self._resolve_tool_paths(config)

    def save(self, config: MixerDeckConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        # Backup existing config
        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def reload(self) -> MixerDeckConfig:
        """Reload configuration from disk."""
        return self.load()

    def _ensure_config_exists(self) -> None:
        """Ensure config file exists, create from defaults if needed."""
        if not self.config_path.exists():
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            defaults = MixerDeckConfig(config_version=self.CURRENT_VERSION).model_dump()
            config_yaml = yaml.dump(defaults, default_flow_style=False, sort_keys=False)
            self.config_path.write_text(config_yaml)

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file."""
        config_text = self.config_path.read_text()
        return yaml.safe_load(config_text) or {}

    def _create_config_object(self, raw_config: dict[str, Any]) -> MixerDeckConfig:
        """Create MixerDeckConfig object from dictionary.

        Args:
            raw_config: Configuration dictionary

        Returns:
            MixerDeckConfig: Typed configuration object
        """
        if "logging" in raw_config and isinstance(raw_config["logging"], dict):
            raw_config["logging"] = LoggingConfig(**raw_config["logging"])

        expected_fields = set(MixerDeckConfig.model_fields.keys())
        filtered_config = {k: v for k, v in raw_config.items() if k in expected_fields}

        unexpected_fields = set(raw_config.keys()) - expected_fields
        if unexpected_fields:
            logger.warning("Filtered out unexpected config fields: %s", unexpected_fields)

        return MixerDeckConfig(**filtered_config)

    def _resolve_tool_paths(self, config: MixerDeckConfig) -> MixerDeckConfig:
        """Fill in tool executable paths that were left empty."""
        updates = {}
        if not config.svcl_path:
            updates["svcl_path"] = str(self.path_resolver.get_svcl_path())
        if not config.getnir_path:
            updates["getnir_path"] = str(self.path_resolver.get_getnir_path())
        return config.model_copy(update=updates) if updates else config

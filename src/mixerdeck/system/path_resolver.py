import os
from pathlib import Path


class PathResolver:
    """Central authority for all file path resolution in MixerDeck.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        # Core directory paths from environment variables
        self.app_dir = Path(os.getenv("MIXERDECK_APP", os.getcwd()))
        self.data_dir = Path(os.getenv("MIXERDECK_DATA", str(self.app_dir / "data")))

    def get_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks MIXERDECK_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("MIXERDECK_CONFIG")
        if config_path:
            return Path(config_path)

        # Default: runtime config in data directory
        return self.data_dir / "config" / "mixerdeck.yaml"

    def get_settings_path(self) -> Path:
        """Get the path to the user settings record (whitelisted apps etc.)."""
        return self.data_dir / "config" / "settings.yaml"

    def get_tools_dir(self) -> Path:
        """Get the directory holding the external audio executables."""
        tools_dir = os.getenv("MIXERDECK_TOOLS")
        if tools_dir:
            return Path(tools_dir)
        return self.app_dir

    def get_svcl_path(self) -> Path:
        """Get the default path to the sound volume command-line tool."""
        return self.get_tools_dir() / "svcl.exe"

    def get_getnir_path(self) -> Path:
        """Get the default path to the tabular output filter tool."""
        return self.get_tools_dir() / "GetNir.exe"

    def get_repo_path(self) -> Path:
        """Get the path to the MixerDeck repository root."""
        return self.app_dir

    def get_data_dir(self) -> Path:
        """Get the data directory path.

        Returns:
            Path to the data directory where all runtime data is stored.
        """
        return self.data_dir

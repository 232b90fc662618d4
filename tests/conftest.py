from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from mixerdeck.audio.command_runner import CommandOutput, CommandRunner
from mixerdeck.system.path_resolver import PathResolver


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Get the absolute path to the repository root."""
    return Path(__file__).parent.parent.resolve()


@pytest.fixture
def path_resolver(tmp_path: Path, repo_root: Path) -> PathResolver:
    """Provide a PathResolver whose writable paths live under tmp_path.

    The config and settings files go to a temp config dir so tests never touch
    the real data/ directory; the tool executables resolve to a temp tools dir
    where tests may create placeholder files.
    """
    temp_config_dir = tmp_path / "config"
    temp_config_dir.mkdir(parents=True)
    temp_data_dir = tmp_path / "data"
    temp_data_dir.mkdir(parents=True)
    temp_tools_dir = tmp_path / "tools"
    temp_tools_dir.mkdir(parents=True)

    resolver = PathResolver()
    resolver.data_dir = temp_data_dir
    resolver.get_data_dir = lambda: temp_data_dir
    resolver.get_config_path = lambda: temp_config_dir / "mixerdeck.yaml"
    resolver.get_settings_path = lambda: temp_config_dir / "settings.yaml"
    resolver.get_tools_dir = lambda: temp_tools_dir
    resolver.get_svcl_path = lambda: temp_tools_dir / "svcl.exe"
    resolver.get_getnir_path = lambda: temp_tools_dir / "GetNir.exe"
    resolver.get_repo_path = lambda: repo_root
    return resolver


@pytest.fixture
def mock_runner():
    """A CommandRunner whose run/run_pipeline succeed with empty output by default."""
    runner = MagicMock(spec=CommandRunner)
    runner.run = AsyncMock(return_value=CommandOutput(stdout="", stderr=""))
    runner.run_pipeline = AsyncMock(return_value=CommandOutput(stdout="", stderr=""))
    return runner

from unittest.mock import AsyncMock, MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from mixerdeck.audio.models import VolumeCommandResult
from mixerdeck.audio.processes import ProcessEnumerationService
from mixerdeck.audio.service import AudioOrchestrationService
from mixerdeck.config import ConfigManager
from mixerdeck.settings.service import SettingsService
from mixerdeck.web.core.container import Container
from mixerdeck.web.core.factory import create_app


@pytest.fixture
def mock_audio_service():
    """Create a mock AudioOrchestrationService whose operations succeed."""
    mock = MagicMock(spec=AudioOrchestrationService)
    mock.get_devices = AsyncMock()
    mock.get_volume = AsyncMock(return_value=VolumeCommandResult.ok(50))
    mock.set_volume = AsyncMock()
    mock.get_muted = AsyncMock(return_value=VolumeCommandResult.ok(False))
    mock.set_muted = AsyncMock()
    mock.get_applications = AsyncMock(return_value=VolumeCommandResult.ok(()))
    mock.set_application_volume = AsyncMock()
    return mock


@pytest.fixture
def mock_process_service():
    """Create a mock ProcessEnumerationService."""
    mock = MagicMock(spec=ProcessEnumerationService)
    mock.list_processes = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def app_with_audio_services(path_resolver, mock_audio_service, mock_process_service):
    """Create the app with mocked audio services and temp-path config and settings.

    Providers are overridden BEFORE the app is created so wiring picks them up.
    """
    Container.path_resolver.override(providers.Object(path_resolver))
    test_config = ConfigManager(path_resolver).load()
    Container.config.override(providers.Object(test_config))
    Container.audio_service.override(providers.Object(mock_audio_service))
    Container.process_service.override(providers.Object(mock_process_service))
    Container.settings_service.override(providers.Object(SettingsService(path_resolver)))

    app = create_app()

    yield app

    Container.path_resolver.reset_override()
    Container.config.reset_override()
    Container.audio_service.reset_override()
    Container.process_service.reset_override()
    Container.settings_service.reset_override()


@pytest.fixture
def client(app_with_audio_services):
    """Create test client."""
    return TestClient(app_with_audio_services)

"""Dependency injection container for the MixerDeck application."""

from dependency_injector import containers, providers

from mixerdeck.audio.command_runner import CommandRunner
from mixerdeck.audio.processes import ProcessEnumerationService
from mixerdeck.audio.service import AudioOrchestrationService
from mixerdeck.settings.service import SettingsService
from mixerdeck.system.path_resolver import PathResolver
from mixerdeck.web.core.config import get_config


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    All services are singletons: they hold configuration only, and every
    external command runs in its own process.
    """

    # Core infrastructure services - singletons
    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    command_runner = providers.Singleton(
        CommandRunner,
        timeout=config.provided.command_timeout,
    )

    # Audio control
    audio_service = providers.Singleton(
        AudioOrchestrationService,
        runner=command_runner,
        svcl_path=config.provided.svcl_path,
        getnir_path=config.provided.getnir_path,
    )

    process_service = providers.Singleton(
        ProcessEnumerationService,
        runner=command_runner,
        svcl_path=config.provided.svcl_path,
    )

    # User settings
    settings_service = providers.Singleton(
        SettingsService,
        path_resolver=path_resolver,
    )

"""Build a synchronizer that follows a MixerDeck server from configuration."""

import logging

import httpx

from mixerdeck.client.api_client import AudioApiClient
from mixerdeck.client.synchronizer import AudioState, AudioStateSynchronizer
from mixerdeck.config import MixerDeckConfig

logger = logging.getLogger(__name__)


def create_synchronizer(
    config: MixerDeckConfig, transport: httpx.AsyncBaseTransport | None = None
) -> AudioStateSynchronizer:
    """Create a synchronizer talking to ``config.api_base_url``.

    The client times out after ``command_timeout`` and volume writes use the
    configured debounce window. The configured default device is addressed
    until another one is selected.
    """
    client = AudioApiClient(
        config.api_base_url, timeout=config.command_timeout, transport=transport
    )
    return AudioStateSynchronizer(
        client,
        debounce_seconds=config.debounce_seconds,
        initial_state=AudioState(current_device=config.default_device),
    )


async def start_synchronizer(
    config: MixerDeckConfig, transport: httpx.AsyncBaseTransport | None = None
) -> AudioStateSynchronizer:
    """Create a synchronizer, load the full state and start refreshing applications."""
    synchronizer = create_synchronizer(config, transport)
    await synchronizer.refresh()
    synchronizer.auto_refresh_applications(config.application_refresh_interval)
    logger.info(
        "Following %s (refreshing applications every %ss)",
        config.api_base_url,
        config.application_refresh_interval,
    )
    return synchronizer


async def stop_synchronizer(synchronizer: AudioStateSynchronizer) -> None:
    """Stop a synchronizer created here and close its HTTP client."""
    await synchronizer.close()
    if isinstance(synchronizer.backend, AudioApiClient):
        await synchronizer.backend.close()

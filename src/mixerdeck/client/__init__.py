"""Client-side state synchronization and API access."""

from mixerdeck.client.api_client import AudioApiClient
from mixerdeck.client.factory import create_synchronizer, start_synchronizer, stop_synchronizer
from mixerdeck.client.synchronizer import (
    AudioBackend,
    AudioState,
    AudioStateSynchronizer,
    PendingWrite,
    TargetKey,
    TargetKind,
)

__all__ = [
    "AudioApiClient",
    "AudioBackend",
    "AudioState",
    "AudioStateSynchronizer",
    "PendingWrite",
    "TargetKey",
    "TargetKind",
    "create_synchronizer",
    "start_synchronizer",
    "stop_synchronizer",
]

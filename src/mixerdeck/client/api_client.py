"""HTTP client for the MixerDeck API.

Mirrors AudioOrchestrationService over the network so the synchronizer can run
against a remote server. Transport failures become NETWORK_ERROR results.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from mixerdeck.audio.errors import AudioErrorKind
from mixerdeck.audio.models import (
    Application,
    AudioProcess,
    Device,
    DeviceDirection,
    DeviceList,
    VolumeCommandResult,
)
from mixerdeck.audio.parser import DEFAULT_DEVICE_PLACEHOLDER

logger = logging.getLogger(__name__)


def _error_kind(payload: dict[str, Any]) -> AudioErrorKind:
    try:
        return AudioErrorKind(payload.get("errorKind") or AudioErrorKind.UNKNOWN_ERROR)
    except ValueError:
        return AudioErrorKind.UNKNOWN_ERROR


def _device_from_json(data: dict[str, Any]) -> Device:
    return Device(
        name=data["name"],
        device_identifier=data.get("deviceIdentifier", ""),
        volume_percent=float(data.get("volume", 0)),
        is_default=bool(data.get("isDefault", False)),
        direction=DeviceDirection(data.get("direction", DeviceDirection.RENDER.value)),
    )


def _application_from_json(data: dict[str, Any]) -> Application:
    return Application(
        name=data["name"],
        process_path=data["processPath"],
        volume_percent=float(data.get("volume", 0)),
        instance_id=data.get("instanceId"),
    )


def _process_from_json(data: dict[str, Any]) -> AudioProcess:
    return AudioProcess(
        name=data["name"],
        process_path=data["processPath"],
        is_active=bool(data.get("isActive", False)),
        icon_path=data.get("iconPath"),
    )


class AudioApiClient:
    """Async client for the ``/api/audio`` endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api", timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AudioApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self, method: str, url: str, fallback_error: str, **kwargs: Any
    ) -> tuple[dict[str, Any] | None, VolumeCommandResult | None]:
        """Perform a request, returning the JSON body or a failed result."""
        try:
            response = await self._client.request(method, url, **kwargs)
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("%s %s failed: %s", method, url, e)
            return None, VolumeCommandResult.failed(
                AudioErrorKind.NETWORK_ERROR, str(e) or "Network error"
            )

        if not isinstance(payload, dict):
            logger.error("%s %s returned an unexpected body: %r", method, url, payload)
            return None, VolumeCommandResult.failed(
                AudioErrorKind.NETWORK_ERROR, "Unexpected response body"
            )
        if response.is_error or not payload.get("success", False):
            return None, VolumeCommandResult.failed(
                _error_kind(payload), payload.get("error") or fallback_error
            )
        return payload, None

    async def _call(
        self,
        method: str,
        url: str,
        fallback_error: str,
        build: Callable[[dict[str, Any]], Any],
        **kwargs: Any,
    ) -> VolumeCommandResult:
        """Perform a request and build the result value from its body."""
        payload, failure = await self._request(method, url, fallback_error, **kwargs)
        if failure:
            return failure
        try:
            return VolumeCommandResult.ok(build(payload))
        except (KeyError, ValueError, TypeError) as e:
            logger.error("%s %s returned a malformed body: %s", method, url, e)
            return VolumeCommandResult.failed(
                AudioErrorKind.NETWORK_ERROR, f"Malformed response: {e}"
            )

    async def get_devices(self) -> VolumeCommandResult:
        return await self._call(
            "GET",
            "/audio/devices",
            "Failed to get device list",
            lambda payload: DeviceList(
                devices=tuple(_device_from_json(d) for d in payload.get("devices", [])),
                default_device=payload.get("defaultDevice") or DEFAULT_DEVICE_PLACEHOLDER,
            ),
        )

    async def get_volume(self, device: str) -> VolumeCommandResult:
        return await self._call(
            "GET",
            "/audio/volume",
            "Failed to get volume",
            lambda payload: int(payload["volume"]),
            params={"device": device},
        )

    async def set_volume(self, device: str, volume: float) -> VolumeCommandResult:
        return await self._call(
            "POST",
            "/audio/volume",
            "Failed to set volume",
            lambda payload: int(payload["volume"]),
            json={"device": device, "volume": volume},
        )

    async def get_muted(self, device: str) -> VolumeCommandResult:
        return await self._call(
            "GET",
            "/audio/mute",
            "Failed to get mute state",
            lambda payload: bool(payload["muted"]),
            params={"device": device},
        )

    async def set_muted(self, device: str, muted: bool) -> VolumeCommandResult:
        return await self._call(
            "POST",
            "/audio/mute",
            "Failed to set mute state",
            lambda payload: bool(payload["muted"]),
            json={"device": device, "mute": muted},
        )

    async def get_applications(self) -> VolumeCommandResult:
        return await self._call(
            "GET",
            "/audio/applications",
            "Failed to get applications",
            lambda payload: tuple(
                _application_from_json(a) for a in payload.get("applications", [])
            ),
        )

    async def set_application_volume(
        self, process_path: str, volume: float, instance_id: str | None = None
    ) -> VolumeCommandResult:
        body: dict[str, Any] = {"processPath": process_path, "volume": volume}
        if instance_id is not None:
            body["instanceId"] = instance_id
        return await self._call(
            "POST",
            "/audio/applications/volume",
            "Failed to set application volume",
            lambda payload: int(payload["volume"]),
            json=body,
        )

    async def list_processes(self) -> VolumeCommandResult:
        return await self._call(
            "GET",
            "/audio/processes",
            "Failed to get processes",
            lambda payload: [_process_from_json(p) for p in payload.get("processes", [])],
        )

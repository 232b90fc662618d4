"""Optimistic client-side state for the audio mixer.

UI mutations update the displayed state immediately and are written to the
backend afterwards. Each addressable target (a device's volume, a device's
mute, an application's volume) carries a generation counter: only the result
of the most recently issued write for a target may change what is displayed.
Earlier writes are left to finish, and their results are dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Protocol

from mixerdeck.audio.errors import AudioErrorKind
from mixerdeck.audio.models import Application, Device, VolumeCommandResult
from mixerdeck.audio.parser import DEFAULT_DEVICE_PLACEHOLDER
from mixerdeck.audio.sanitizer import clamp_volume

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.1


class AudioBackend(Protocol):
    """Operations the synchronizer needs from the orchestration layer."""

    async def get_devices(self) -> VolumeCommandResult: ...

    async def get_volume(self, device: str) -> VolumeCommandResult: ...

    async def set_volume(self, device: str, volume: float) -> VolumeCommandResult: ...

    async def get_muted(self, device: str) -> VolumeCommandResult: ...

    async def set_muted(self, device: str, muted: bool) -> VolumeCommandResult: ...

    async def get_applications(self) -> VolumeCommandResult: ...

    async def set_application_volume(
        self, process_path: str, volume: float, instance_id: str | None = None
    ) -> VolumeCommandResult: ...


class TargetKind(str, Enum):
    DEVICE_VOLUME = "device_volume"
    DEVICE_MUTE = "device_mute"
    APPLICATION_VOLUME = "application_volume"


@dataclass(frozen=True)
class TargetKey:
    """An addressable control point."""

    kind: TargetKind
    name: str
    instance_id: str | None = None

    @classmethod
    def for_application(cls, application: Application) -> "TargetKey":
        return cls(TargetKind.APPLICATION_VOLUME, application.process_path, application.instance_id)


@dataclass(frozen=True)
class PendingWrite:
    """A write issued for a target, tagged with the target's generation at issue time."""

    target_key: TargetKey
    requested_value: Any
    generation: int


@dataclass(frozen=True)
class AudioState:
    """Snapshot of everything the mixer UI displays. Replaced, never mutated."""

    devices: tuple[Device, ...] = ()
    default_device: str = DEFAULT_DEVICE_PLACEHOLDER
    current_device: str = DEFAULT_DEVICE_PLACEHOLDER
    volume: int = 50
    muted: bool = False
    applications: tuple[Application, ...] = ()
    loading_devices: bool = False
    loading_applications: bool = False
    loading_volume: bool = False
    error: str | None = None


StateListener = Callable[[AudioState], None]


class AudioStateSynchronizer:
    """Applies mixer changes optimistically and reconciles them with the backend.

    Volume changes are debounced per target: only the last value set within
    ``debounce_seconds`` of quiet is transmitted. Mute changes are sent at once.
    A failed write that is still the latest for its target restores the value
    displayed before the pending series began and sets ``state.error``.

    Mutating methods must be called from a running event loop.
    """

    def __init__(
        self,
        backend: AudioBackend,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        initial_state: AudioState | None = None,
    ):
        self.backend = backend
        self.debounce_seconds = debounce_seconds
        self._state = initial_state or AudioState()
        self._listeners: list[StateListener] = []
        self._generations: dict[TargetKey, int] = {}
        self._pending: dict[TargetKey, PendingWrite] = {}
        self._last_known_good: dict[TargetKey, Any] = {}
        self._debounce_handles: dict[TargetKey, asyncio.TimerHandle] = {}
        self._inflight: set[asyncio.Task] = set()
        self._refresh_task: asyncio.Task | None = None

    # State access

    @property
    def state(self) -> AudioState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked with every new state snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def generation(self, key: TargetKey) -> int:
        """Return the generation of the latest write issued for ``key`` (0 if none)."""
        return self._generations.get(key, 0)

    def is_pending(self, key: TargetKey) -> bool:
        return key in self._pending

    def _replace(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener failed")

    # Loading

    async def _fetch(
        self, call: Callable[..., Awaitable[VolumeCommandResult]], *args: Any
    ) -> VolumeCommandResult:
        try:
            return await call(*args)
        except Exception as e:
            logger.exception("Backend call %s raised", getattr(call, "__name__", call))
            return VolumeCommandResult.failed(AudioErrorKind.UNKNOWN_ERROR, str(e))

    async def load_devices(self) -> None:
        """Refresh the device list and default device."""
        self._replace(loading_devices=True, error=None)
        result = await self._fetch(self.backend.get_devices)
        if result.success:
            self._replace(
                devices=tuple(result.value.devices),
                default_device=result.value.default_device,
                loading_devices=False,
            )
        else:
            self._replace(loading_devices=False, error=result.error)

    async def load_volume(self, device: str | None = None) -> None:
        """Refresh volume and mute state of ``device`` (the current device by default).

        Targets with a pending write keep their optimistic value.
        """
        target_device = device or self._state.current_device
        self._replace(loading_volume=True, error=None)
        volume_result, mute_result = await asyncio.gather(
            self._fetch(self.backend.get_volume, target_device),
            self._fetch(self.backend.get_muted, target_device),
        )

        failed = next((r for r in (volume_result, mute_result) if not r.success), None)
        if failed is not None:
            self._replace(loading_volume=False, error=failed.error)
            return

        changes: dict[str, Any] = {"loading_volume": False}
        if target_device == self._state.current_device:
            if not self.is_pending(TargetKey(TargetKind.DEVICE_VOLUME, target_device)):
                changes["volume"] = volume_result.value
            if not self.is_pending(TargetKey(TargetKind.DEVICE_MUTE, target_device)):
                changes["muted"] = mute_result.value
        self._replace(**changes)

    async def load_applications(self) -> None:
        """Replace the application list, keeping optimistic values of pending targets."""
        self._replace(loading_applications=True, error=None)
        result = await self._fetch(self.backend.get_applications)
        if not result.success:
            self._replace(loading_applications=False, error=result.error)
            return

        displayed = {app.key: app.volume_percent for app in self._state.applications}
        applications = []
        for app in result.value:
            if self.is_pending(TargetKey.for_application(app)) and app.key in displayed:
                app = replace(app, volume_percent=displayed[app.key])
            applications.append(app)
        self._replace(applications=tuple(applications), loading_applications=False)

    async def refresh(self) -> None:
        """Reload devices, applications and the current device's volume concurrently."""
        await asyncio.gather(self.load_devices(), self.load_applications(), self.load_volume())

    async def select_device(self, device: str) -> None:
        """Switch the device that volume and mute changes address and load its state."""
        self._replace(current_device=device)
        await self.load_volume(device)

    def clear_error(self) -> None:
        self._replace(error=None)

    # Mutations

    def set_volume(self, volume: float) -> PendingWrite:
        """Show ``volume`` for the current device now and send it after the quiet window."""
        level = clamp_volume(volume)
        key = TargetKey(TargetKind.DEVICE_VOLUME, self._state.current_device)
        pending = self._begin_write(key, level)
        self._schedule_debounced(pending)
        return pending

    def set_mute(self, muted: bool) -> PendingWrite:
        """Show the mute state now and send it immediately."""
        key = TargetKey(TargetKind.DEVICE_MUTE, self._state.current_device)
        pending = self._begin_write(key, bool(muted))
        self._dispatch(pending)
        return pending

    def toggle_mute(self) -> PendingWrite:
        return self.set_mute(not self._state.muted)

    def set_application_volume(self, application: Application, volume: float) -> PendingWrite:
        """Show ``volume`` for one application now and send it after the quiet window."""
        level = clamp_volume(volume)
        pending = self._begin_write(TargetKey.for_application(application), level)
        self._schedule_debounced(pending)
        return pending

    def _begin_write(self, key: TargetKey, value: Any) -> PendingWrite:
        # The value displayed before a pending series starts is the rollback point.
        if key not in self._pending:
            self._last_known_good[key] = self._displayed_value(key)

        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        pending = PendingWrite(target_key=key, requested_value=value, generation=generation)
        self._pending[key] = pending

        self._apply_displayed_value(key, value, error=None)
        return pending

    def _schedule_debounced(self, pending: PendingWrite) -> None:
        key = pending.target_key
        previous = self._debounce_handles.pop(key, None)
        if previous is not None:
            previous.cancel()

        loop = asyncio.get_running_loop()
        self._debounce_handles[key] = loop.call_later(
            self.debounce_seconds, self._fire_debounced, pending
        )

    def _fire_debounced(self, pending: PendingWrite) -> None:
        self._debounce_handles.pop(pending.target_key, None)
        self._dispatch(pending)

    def _dispatch(self, pending: PendingWrite) -> None:
        task = asyncio.get_running_loop().create_task(self._write(pending))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _write(self, pending: PendingWrite) -> None:
        try:
            result = await self._send(pending)
        except Exception as e:
            logger.exception("Write for %s raised", pending.target_key)
            result = VolumeCommandResult.failed(AudioErrorKind.UNKNOWN_ERROR, str(e))
        self._resolve(pending, result)

    async def _send(self, pending: PendingWrite) -> VolumeCommandResult:
        key = pending.target_key
        if key.kind is TargetKind.DEVICE_VOLUME:
            return await self.backend.set_volume(key.name, pending.requested_value)
        if key.kind is TargetKind.DEVICE_MUTE:
            return await self.backend.set_muted(key.name, pending.requested_value)
        return await self.backend.set_application_volume(
            key.name, pending.requested_value, key.instance_id
        )

    def _resolve(self, pending: PendingWrite, result: VolumeCommandResult) -> None:
        key = pending.target_key
        if self._generations.get(key) != pending.generation:
            logger.debug(
                "Discarding result of superseded write %s (generation %d)",
                key,
                pending.generation,
            )
            return

        self._pending.pop(key, None)
        if result.success:
            self._last_known_good[key] = pending.requested_value
            return

        logger.warning("Write for %s failed, rolling back: %s", key, result.error)
        self._apply_displayed_value(
            key, self._last_known_good.get(key), error=result.error or "Unknown error occurred"
        )

    def _displayed_value(self, key: TargetKey) -> Any:
        if key.kind is TargetKind.DEVICE_VOLUME:
            return self._state.volume
        if key.kind is TargetKind.DEVICE_MUTE:
            return self._state.muted
        for app in self._state.applications:
            if app.key == (key.name, key.instance_id):
                return app.volume_percent
        return None

    def _apply_displayed_value(self, key: TargetKey, value: Any, error: str | None) -> None:
        changes: dict[str, Any] = {"error": error}
        if value is None:
            self._replace(**changes)
            return

        if key.kind is TargetKind.APPLICATION_VOLUME:
            changes["applications"] = tuple(
                replace(app, volume_percent=value)
                if app.key == (key.name, key.instance_id)
                else app
                for app in self._state.applications
            )
        elif key.name == self._state.current_device:
            field_name = "volume" if key.kind is TargetKind.DEVICE_VOLUME else "muted"
            changes[field_name] = value
        self._replace(**changes)

    # Lifecycle

    def auto_refresh_applications(self, interval: float) -> asyncio.Task:
        """Start reloading the application list every ``interval`` seconds."""
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()

        async def refresh_loop() -> None:
            while True:
                await asyncio.sleep(interval)
                await self.load_applications()

        self._refresh_task = asyncio.get_running_loop().create_task(refresh_loop())
        return self._refresh_task

    async def wait_idle(self) -> None:
        """Wait until no debounced write is scheduled and no write is in flight."""
        while self._debounce_handles or self._inflight:
            if self._inflight:
                await asyncio.gather(*list(self._inflight), return_exceptions=True)
            else:
                await asyncio.sleep(self.debounce_seconds / 2)

    async def close(self) -> None:
        """Stop auto refresh, drop unsent debounced writes and wait for in-flight ones."""
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            await asyncio.gather(self._refresh_task, return_exceptions=True)
            self._refresh_task = None

        for key, handle in list(self._debounce_handles.items()):
            handle.cancel()
            del self._debounce_handles[key]
            # An unsent write never resolves, so drop its pending marker as well.
            self._pending.pop(key, None)

        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

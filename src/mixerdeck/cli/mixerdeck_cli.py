"""Command-line access to MixerDeck audio control.

Runs the same orchestration service as the web API, directly against the
local volume tools.
"""

import asyncio
import json
import sys
from dataclasses import asdict

import click

from mixerdeck.audio.command_runner import CommandRunner
from mixerdeck.audio.errors import AudioError
from mixerdeck.audio.models import VolumeCommandResult
from mixerdeck.audio.processes import ProcessEnumerationService
from mixerdeck.audio.sanitizer import validate_volume_range
from mixerdeck.audio.service import AudioOrchestrationService
from mixerdeck.client import AudioState, start_synchronizer, stop_synchronizer
from mixerdeck.config import ConfigManager, MixerDeckConfig


def _load_config(ctx: click.Context) -> MixerDeckConfig:
    if "config" not in ctx.obj:
        ctx.obj["config"] = ConfigManager().load()
    return ctx.obj["config"]


def _audio_service(ctx: click.Context) -> AudioOrchestrationService:
    config = _load_config(ctx)
    runner = CommandRunner(timeout=config.command_timeout)
    return AudioOrchestrationService(runner, config.svcl_path, config.getnir_path)


def _fail(result: VolumeCommandResult) -> None:
    kind = result.error_kind.value if result.error_kind else "unknown"
    click.echo(click.style(f"✗ {result.error} ({kind})", fg="red"), err=True)
    sys.exit(1)


def _check_volume(ctx: click.Context, param: click.Parameter, value: float | None) -> float | None:
    if value is None:
        return None
    try:
        return validate_volume_range(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """MixerDeck audio control.

    Examples:
      # List render devices
      mixerdeck devices

      # Read, then set the volume of a device
      mixerdeck volume Speakers
      mixerdeck volume Speakers 40

      # Mute a device
      mixerdeck mute Speakers on

      # Set an application's volume
      mixerdeck app-volume "C:\\Program Files\\App\\app.exe" 60

      # Start the web API
      mixerdeck serve --port 8000

      # Follow the server named by api_base_url
      mixerdeck watch
    """
    ctx.ensure_object(dict)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the web API with uvicorn."""
    import uvicorn

    uvicorn.run("mixerdeck.web.main:app", host=host, port=port, reload=reload)


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output devices in JSON format")
@click.pass_context
def devices(ctx: click.Context, output_json: bool) -> None:
    """List render devices."""
    result = asyncio.run(_audio_service(ctx).get_devices())
    if not result.success:
        _fail(result)

    device_list = result.value
    if output_json:
        payload = {
            "defaultDevice": device_list.default_device,
            "devices": [
                {**asdict(device), "direction": device.direction.value}
                for device in device_list.devices
            ],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if not device_list.devices:
        click.echo(click.style("No render devices found", fg="yellow"))
        return
    for device in device_list.devices:
        marker = click.style(" (default)", fg="green") if device.is_default else ""
        click.echo(f"  {device.name:<32} {device.volume_percent:>5.1f}%{marker}")


@cli.command()
@click.argument("device")
@click.argument("level", type=float, required=False, callback=_check_volume)
@click.pass_context
def volume(ctx: click.Context, device: str, level: float | None) -> None:
    """Show DEVICE's volume, or set it to LEVEL (0-100)."""
    service = _audio_service(ctx)
    if level is None:
        result = asyncio.run(service.get_volume(device))
        if not result.success:
            _fail(result)
        click.echo(f"{device}: {result.value}%")
        return

    result = asyncio.run(service.set_volume(device, level))
    if not result.success:
        _fail(result)
    click.echo(click.style(f"✓ {device} volume set to {result.value}%", fg="green"))


@cli.command()
@click.argument("device")
@click.argument("state", type=click.Choice(["on", "off"]), required=False)
@click.pass_context
def mute(ctx: click.Context, device: str, state: str | None) -> None:
    """Show DEVICE's mute state, or turn muting on or off."""
    service = _audio_service(ctx)
    if state is None:
        result = asyncio.run(service.get_muted(device))
        if not result.success:
            _fail(result)
        click.echo(f"{device}: {'muted' if result.value else 'unmuted'}")
        return

    result = asyncio.run(service.set_muted(device, state == "on"))
    if not result.success:
        _fail(result)
    click.echo(click.style(f"✓ {device} {'muted' if result.value else 'unmuted'}", fg="green"))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output applications in JSON format")
@click.pass_context
def apps(ctx: click.Context, output_json: bool) -> None:
    """List applications currently playing audio."""
    result = asyncio.run(_audio_service(ctx).get_applications())
    applications = result.value or ()
    if output_json:
        click.echo(json.dumps([asdict(app) for app in applications], indent=2))
        return

    if not applications:
        click.echo(click.style("No applications are playing audio", fg="yellow"))
        return
    for app in applications:
        instance = f" [{app.instance_id}]" if app.instance_id else ""
        click.echo(f"  {app.name:<32} {app.volume_percent:>5.1f}%  {app.process_path}{instance}")


@cli.command("app-volume")
@click.argument("process_path")
@click.argument("level", type=float, callback=_check_volume)
@click.pass_context
def app_volume(ctx: click.Context, process_path: str, level: float) -> None:
    """Set the volume of the application at PROCESS_PATH to LEVEL (0-100)."""
    result = asyncio.run(_audio_service(ctx).set_application_volume(process_path, level))
    if not result.success:
        _fail(result)
    click.echo(click.style(f"✓ {process_path} volume set to {result.value}%", fg="green"))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output processes in JSON format")
@click.pass_context
def processes(ctx: click.Context, output_json: bool) -> None:
    """List processes with an audio session."""
    config = _load_config(ctx)
    service = ProcessEnumerationService(
        CommandRunner(timeout=config.command_timeout), config.svcl_path
    )
    try:
        found = asyncio.run(service.list_processes())
    except AudioError as e:
        click.echo(click.style(f"✗ {e.message} ({e.kind.value})", fg="red"), err=True)
        sys.exit(1)

    if output_json:
        click.echo(json.dumps([asdict(process) for process in found], indent=2))
        return
    for process in found:
        if process.is_active:
            status = click.style("●", fg="green")
        else:
            status = click.style("○", dim=True)
        click.echo(f"  {status} {process.name:<32} {process.process_path}")


def _echo_state(state: AudioState) -> None:
    if state.loading_devices or state.loading_volume or state.loading_applications:
        return
    if state.error:
        click.echo(click.style(f"✗ {state.error}", fg="red"), err=True)
        return
    muted = " (muted)" if state.muted else ""
    click.echo(
        f"{state.current_device}: {state.volume}%{muted}, "
        f"{len(state.applications)} application(s) playing"
    )


async def _watch(config: MixerDeckConfig, duration: float | None) -> None:
    synchronizer = await start_synchronizer(config)
    _echo_state(synchronizer.state)
    synchronizer.subscribe(_echo_state)
    try:
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await stop_synchronizer(synchronizer)


@cli.command()
@click.option("--duration", type=float, default=None, help="Stop after this many seconds")
@click.pass_context
def watch(ctx: click.Context, duration: float | None) -> None:
    """Follow a running MixerDeck server and print state changes."""
    config = _load_config(ctx)
    click.echo(f"Watching {config.api_base_url} (Ctrl+C to stop)")
    try:
        asyncio.run(_watch(config, duration))
    except KeyboardInterrupt:
        click.echo("Stopped")


def main() -> None:
    """Entry point for the MixerDeck CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

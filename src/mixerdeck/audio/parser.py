"""Parsing of the tabular output written by the audio tools.

The primary tool writes comma-separated rows (with simple double-quote
toggling); the filter tool writes tab-separated rows. Neither emits a header.
Lines with too few fields are dropped without affecting the others.
"""

import re
from collections.abc import Callable, Sequence

from mixerdeck.audio.models import Application, AudioProcess, Device, DeviceList

DEFAULT_DEVICE_PLACEHOLDER = "DefaultRenderDevice"
DEFAULT_MARKER = "render"

DEVICE_FIELD_COUNT = 4
APPLICATION_FIELD_COUNT = 3
PROCESS_FIELD_COUNT = 4

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_csv_line(line: str) -> list[str]:
    """Split a comma-separated line, honouring double-quoted fields."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    if current:
        fields.append("".join(current).strip())

    return fields


def parse_tsv_line(line: str) -> list[str]:
    """Split a tab-separated line and trim each field."""
    return [field.strip() for field in line.split("\t")]


def iter_records(text: str, split_line: Callable[[str], list[str]]) -> list[list[str]]:
    """Split output into non-blank lines and each line into trimmed fields."""
    return [split_line(line) for line in text.splitlines() if line.strip()]


def parse_number(text: str) -> float:
    """Parse the leading number of ``text`` (``"45.5%"`` -> 45.5); 0 when there is none."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_devices(text: str) -> DeviceList:
    """Parse filter-tool rows of ``device identifier, name, volume, default marker``."""
    devices: list[Device] = []
    default_device = ""

    for fields in iter_records(text, parse_tsv_line):
        if len(fields) < DEVICE_FIELD_COUNT:
            continue
        device_identifier, name, volume_text, default_marker = fields[:DEVICE_FIELD_COUNT]
        is_default = default_marker.lower() == DEFAULT_MARKER

        devices.append(
            Device(
                name=name,
                device_identifier=device_identifier,
                volume_percent=parse_number(volume_text),
                is_default=is_default,
            )
        )
        if is_default and not default_device:
            default_device = name

    return DeviceList(
        devices=tuple(devices), default_device=default_device or DEFAULT_DEVICE_PLACEHOLDER
    )


def parse_applications(text: str) -> tuple[Application, ...]:
    """Parse filter-tool rows of ``name, volume, process path``.

    Repeated process paths are numbered in encounter order: the first keeps no
    instance id, later ones get ``instance-1``, ``instance-2`` and so on.
    """
    applications: list[Application] = []
    occurrences: dict[str, int] = {}

    for fields in iter_records(text, parse_tsv_line):
        if len(fields) < APPLICATION_FIELD_COUNT:
            continue
        name, volume_text, process_path = fields[:APPLICATION_FIELD_COUNT]

        seen = occurrences.get(process_path, 0)
        occurrences[process_path] = seen + 1

        applications.append(
            Application(
                name=name,
                process_path=process_path,
                volume_percent=parse_number(volume_text),
                instance_id=f"instance-{seen}" if seen > 0 else None,
            )
        )

    return tuple(applications)


def parse_processes(text: str, columns: Sequence[str]) -> list[AudioProcess]:
    """Parse primary-tool CSV rows of ``name, type, process path, direction``.

    Only application sessions with a process path are kept, one entry per path.
    A process is active when any of its sessions renders audio.
    """
    header = [column.lower() for column in columns]
    processes: dict[str, AudioProcess] = {}

    for fields in iter_records(text, parse_csv_line):
        if len(fields) < PROCESS_FIELD_COUNT:
            continue
        if [field.lower() for field in fields[: len(header)]] == header:
            continue
        name, session_type, process_path, direction = fields[:PROCESS_FIELD_COUNT]
        if session_type.lower() != "application" or not process_path:
            continue

        is_active = direction.lower() == DEFAULT_MARKER
        existing = processes.get(process_path)
        if existing is None:
            processes[process_path] = AudioProcess(
                name=name, process_path=process_path, is_active=is_active
            )
        elif is_active and not existing.is_active:
            processes[process_path] = AudioProcess(
                name=existing.name, process_path=process_path, is_active=True
            )

    return list(processes.values())

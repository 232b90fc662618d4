"""Input sanitization for device identifiers and volume levels."""

import math
import re

_UNSAFE_IDENTIFIER_CHARS = re.compile(r"[^a-zA-Z0-9\s\-_]")

MIN_VOLUME = 0
MAX_VOLUME = 100


def sanitize_identifier(identifier: str) -> str:
    """Strip every character outside letters, digits, whitespace, hyphen and underscore.

    Identifiers come from a trusted enumeration, so this is an allow-list filter
    rather than an escaping scheme.
    """
    return _UNSAFE_IDENTIFIER_CHARS.sub("", identifier)


def clamp_volume(volume: float) -> int:
    """Round to the nearest integer and clamp into [0, 100].

    Halves round up, so 49.5 becomes 50 and -0.5 becomes 0.
    """
    if math.isnan(volume):
        return MIN_VOLUME
    if math.isinf(volume):
        return MAX_VOLUME if volume > 0 else MIN_VOLUME
    return max(MIN_VOLUME, min(MAX_VOLUME, math.floor(volume + 0.5)))


def validate_volume_range(volume: float) -> float:
    """Reject volumes outside [0, 100] before any clamping is applied.

    Raises:
        ValueError: If the volume is out of range or not a number.
    """
    if math.isnan(volume) or volume < MIN_VOLUME or volume > MAX_VOLUME:
        raise ValueError(f"Volume must be between {MIN_VOLUME} and {MAX_VOLUME}")
    return volume

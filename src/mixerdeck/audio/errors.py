"""Error taxonomy and message classification for audio commands."""

from collections.abc import Callable
from enum import Enum


class AudioErrorKind(str, Enum):
    """Closed set of error kinds reported to callers."""

    DEVICE_NOT_FOUND = "DEVICE_NOT_FOUND"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    INVALID_VOLUME = "INVALID_VOLUME"
    COMMAND_FAILED = "COMMAND_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


class AudioError(Exception):
    """A classified failure of an audio operation."""

    def __init__(self, message: str, kind: AudioErrorKind = AudioErrorKind.UNKNOWN_ERROR):
        super().__init__(message)
        self.message = message
        self.kind = kind


def _contains(*fragments: str) -> Callable[[str], bool]:
    def predicate(message: str) -> bool:
        return any(fragment in message for fragment in fragments)

    return predicate


# Ordered: the first matching rule wins.
CLASSIFICATION_RULES: list[tuple[Callable[[str], bool], AudioErrorKind]] = [
    (_contains("not found", "cannot find"), AudioErrorKind.DEVICE_NOT_FOUND),
    (_contains("volume"), AudioErrorKind.INVALID_VOLUME),
    (_contains("command"), AudioErrorKind.COMMAND_FAILED),
]


def classify(raw_error: str | None) -> AudioErrorKind:
    """Map a raw error message to an AudioErrorKind.

    Matching is a case-insensitive substring test against CLASSIFICATION_RULES.
    """
    message = (raw_error or "").lower()
    for predicate, kind in CLASSIFICATION_RULES:
        if predicate(message):
            return kind
    return AudioErrorKind.UNKNOWN_ERROR

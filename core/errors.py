"""
core/errors.py
────────────────────────────────────────────────────────────────────────
Exception hierarchy shared by the stores, the generation client and the
tracker facade. Callers branch on the class (or ``GenerationError.kind``),
never on the message text.
"""

from __future__ import annotations

from enum import Enum


class TrackerError(Exception):
    """Base class for every error raised on purpose by this package."""


class InvalidInput(TrackerError):
    """User-supplied data is missing or blank; nothing was saved."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class StorageError(TrackerError):
    """Reading, decoding or writing a persisted collection failed."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class PlanLimitReached(TrackerError):
    def __init__(self, limit: int) -> None:
        super().__init__(
            f"You can save maximum {limit} diet plans. "
            "Please delete one to generate a new plan."
        )
        self.limit = limit


# ──────────────────────────────────────────────────────────────────────
#  Generation service
# ──────────────────────────────────────────────────────────────────────
class GenerationErrorKind(str, Enum):
    REQUEST_FAILED = "request_failed"
    INVALID_RESPONSE_FORMAT = "invalid_response_format"
    INVALID_STRUCTURE = "invalid_structure"


class GenerationError(TrackerError):
    kind: GenerationErrorKind

    def __init__(self, message: str, raw_output: str = "") -> None:
        super().__init__(message)
        self.raw_output = raw_output


class RequestFailed(GenerationError):
    """Network failure or non-2xx answer from the generation service."""

    kind = GenerationErrorKind.REQUEST_FAILED

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class InvalidResponseFormat(GenerationError):
    """The response envelope carried no usable candidate text."""

    kind = GenerationErrorKind.INVALID_RESPONSE_FORMAT


class InvalidStructure(GenerationError):
    """The candidate text held no valid JSON of the requested shape."""

    kind = GenerationErrorKind.INVALID_STRUCTURE

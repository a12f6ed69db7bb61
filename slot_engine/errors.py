"""
Error taxonomy for the ceremony slot engine.

Fatal conditions are exceptions; non-fatal outcomes (language mismatch,
unknown resource, no overlapping schedule) are reported to the caller as a
`SlotWarning` code on the search result.
"""

from enum import Enum


class SlotEngineError(Exception):
    """Base class for every error raised by the engine."""


class ConfigurationError(SlotEngineError):
    """
    Malformed availability data (rule or blocked date).

    Not a ValueError, so it propagates unchanged out of pydantic model
    validators instead of being wrapped in a ValidationError.
    """


class InvalidDurationError(SlotEngineError, ValueError):
    """Requested ceremony duration is outside the allowed bounds."""


class InvalidWindowError(SlotEngineError, ValueError):
    """Requested date window is reversed or exceeds the maximum span."""


class ResourceNotFoundError(SlotEngineError, LookupError):
    """A celebrant or venue ID has no availability data in the store."""

    def __init__(self, resource_id: str, kind: str = "resource"):
        super().__init__(f"No availability data for {kind} '{resource_id}'")
        self.resource_id = resource_id
        self.kind = kind


class SlotWarning(str, Enum):
    """Warning codes attached to an (empty) search result."""
    LANGUAGE_MISMATCH = "language_mismatch"
    RESOURCE_NOT_FOUND = "resource_not_found"
    NO_OVERLAP = "no_overlap"


# Non-fatal: the slot generator returns an empty result carrying this code.
LanguageMismatch = SlotWarning.LANGUAGE_MISMATCH

# swz_PowerEditor/core/errors.py
from __future__ import annotations


class PowerEditorError(Exception):
    """Base class; ``str(err)`` is the message shown to the user."""


class PowerFileNotFoundError(PowerEditorError):
    pass


class PowerIOError(PowerEditorError):
    pass


class PowerDecodeError(PowerEditorError):
    """Malformed row, field value or description resource."""


class RowDecodeError(PowerDecodeError):
    """A single row could not be turned into a Power; the loader skips it."""


class PowerListNotLoadedError(PowerEditorError):
    def __init__(self, message: str = "Power list not loaded. Please load a file first."):
        super().__init__(message)


class PowerConfigError(PowerEditorError):
    """Invalid value in config.yaml."""

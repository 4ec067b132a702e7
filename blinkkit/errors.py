from __future__ import annotations


class BlinkKitError(Exception):
    """Base class for blinkkit failures."""


class InitializationError(BlinkKitError):
    """The face tracker / model could not be loaded."""


class DeviceError(BlinkKitError):
    """The frame source (camera) could not be acquired."""


class SessionStateError(BlinkKitError):
    """An operation was called in a lifecycle state that does not allow it."""

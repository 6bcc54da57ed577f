"""
Exceptions raised by the nerve center.

Every error derives from NerveCenterError so callers can catch the whole
family at once. Where a built-in exception describes the failure well, the
error also inherits from it (e.g. TypeMismatchError is a TypeError).
"""


class NerveCenterError(Exception):
    """Base class for all nerve center errors."""


class InvalidChannelNameError(NerveCenterError, ValueError):
    """Raised when a channel name or data point key is malformed."""


class InvalidDataPointTypeError(NerveCenterError, ValueError):
    """Raised when a data point is initialized with an unsupported type."""


class DataPointAlreadyDefinedError(NerveCenterError):
    """Raised when a data point that already has a type is initialized again."""


class StrictModeViolationError(NerveCenterError):
    """Raised when writing an uninitialized data point in strict mode."""


class TypeMismatchError(NerveCenterError, TypeError):
    """Raised when a value does not match the declared data point type."""


class NotAnArrayError(NerveCenterError, TypeError):
    """Raised when a list helper is used on a data point that isn't a list."""


class MissingElementsError(NerveCenterError, ValueError):
    """Raised when push or unshift is called without any elements."""

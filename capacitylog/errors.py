"""Exception types raised by capacitylog.

Generation errors and storage errors are kept apart so callers can tell a
bad request from a failed save.
"""


class CapacityLogError(Exception):
    """Base class for all capacitylog errors."""


class InvalidArgument(CapacityLogError, ValueError):
    """Raised when a caller passes an argument outside its contract.

    Example: ``generate(0)`` or ``generate(-1)``. Raised before any simulation
    work begins, so no partial output exists.
    """


class StorageError(CapacityLogError, RuntimeError):
    """Raised when a persistence backend fails to save, load, or clear logs.

    The underlying exception (OSError, JSON decode error, validation error)
    is chained as ``__cause__``.
    """

"""Errors raised around saga execution."""


__all__ = (
    'CompensationFault',
    'InvalidOperationError',
    'TransportFault',
)


class TransportFault(Exception):
    """Raised by a step client when the backend could not be reached."""
    pass


class CompensationFault(Exception):
    """Raised by a compensation that could not undo its step."""
    pass


class InvalidOperationError(Exception):
    """Raised when an operation is invalid for the current state."""
    pass

"""Errors raised by the cart store on caller contract violations."""


__all__ = (
    'InvalidArgument',
)


class InvalidArgument(ValueError):
    """Raised when a malformed line item is passed to the cart."""
    pass

"""Cart store - line items owned by a single cart identity."""

from cart_saga.cart.cart import Cart
from cart_saga.cart.errors import InvalidArgument
from cart_saga.cart.line_item import LineItem


__all__ = (
    'Cart',
    'InvalidArgument',
    'LineItem',
)

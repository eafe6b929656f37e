"""
cart_saga: a shopping cart whose checkout is a compensating saga.

    from cart_saga import entity   # Durable, serialized carts
    from cart_saga import saga     # Checkout saga engine
    from cart_saga import workflow # Replayable workflow backend
"""

from cart_saga.cart import Cart, InvalidArgument, LineItem
from cart_saga.entity import CartEntityHost
from cart_saga.saga import SagaResult

__version__ = "0.1.0"

__all__ = (
    'Cart',
    'CartEntityHost',
    'InvalidArgument',
    'LineItem',
    'SagaResult',
)

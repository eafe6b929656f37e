"""Durable cart entities.

Each cart id is an isolated unit of sequential execution: its operations
are serialized by a per-id lock and its state is loaded from and saved to
an ICartRepository around every operation.
"""

from cart_saga.entity.cart_entity_host import CartEntityHost
from cart_saga.entity.interfaces import ICartRepository
from cart_saga.entity.repositories import InMemoryCartRepository, PgCartRepository


__all__ = (
    'CartEntityHost',
    'ICartRepository',
    'InMemoryCartRepository',
    'PgCartRepository',
)

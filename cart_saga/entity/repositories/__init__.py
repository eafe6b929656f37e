from cart_saga.entity.repositories.in_memory_repository import InMemoryCartRepository
from cart_saga.entity.repositories.pg_repository import PgCartRepository


__all__ = (
    'InMemoryCartRepository',
    'PgCartRepository',
)

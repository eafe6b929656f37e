import typing
from abc import ABCMeta, abstractmethod


__all__ = (
    'ICartRepository',
)


class ICartRepository(metaclass=ABCMeta):
    """Persists one record per cart id holding its ordered item list."""

    @abstractmethod
    async def get(self, cart_id: int) -> dict[str, typing.Any] | None:
        """The persisted record of the cart, or None if it was never saved."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, cart_id: int, state: dict[str, typing.Any]) -> None:
        raise NotImplementedError

import copy
import typing

from cart_saga.entity.interfaces import ICartRepository


__all__ = ('InMemoryCartRepository',)


class InMemoryCartRepository(ICartRepository):
    """Keeps deep copies of the records, like a real store would."""

    def __init__(self):
        self._records: dict[int, dict[str, typing.Any]] = {}

    async def get(self, cart_id: int) -> dict[str, typing.Any] | None:
        state = self._records.get(cart_id)
        return copy.deepcopy(state) if state is not None else None

    async def save(self, cart_id: int, state: dict[str, typing.Any]) -> None:
        self._records[cart_id] = copy.deepcopy(state)

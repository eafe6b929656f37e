"""Cart entity host - serialized, persisted access to carts by id."""

import asyncio
import logging
import typing
import weakref

from cart_saga.cart.cart import Cart
from cart_saga.cart.line_item import LineItem
from cart_saga.entity.interfaces import ICartRepository
from cart_saga.saga.checkout_strategy import ICheckoutStrategy, OnCommit
from cart_saga.saga.saga_result import NOTHING_IN_CART, SagaResult


__all__ = (
    'CartEntityHost',
)


_logger = logging.getLogger(__name__)


class CartEntityHost:
    """Gives every cart id a single writer and durable state.

    Each operation runs under the lock of its cart id, loads the cart from
    the repository first and saves it afterwards if it changed. Operations
    on different cart ids do not wait for each other. A cart that was never
    saved is an empty cart.
    """

    def __init__(
            self,
            repository: ICartRepository,
            checkout_strategy: ICheckoutStrategy,
            resources: typing.Iterable[typing.Any] = (),
    ):
        """Initialize cart entity host.

        Args:
            repository: Where cart records are persisted.
            checkout_strategy: Runs the checkout saga (in process or as a workflow).
            resources: Objects with an async ``close()`` that the host owns,
                such as the step client it was wired with.
        """
        self._repository: ICartRepository = repository
        self._checkout_strategy: ICheckoutStrategy = checkout_strategy
        self._resources: list[typing.Any] = list(resources)
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    async def add_item(self, cart_id: int, item: LineItem) -> None:
        """Append an item.

        Raises:
            InvalidArgument: If the item is missing or unnamed; nothing is saved.
        """
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            cart.add_item(item)
            _logger.info("Adding product %s to cart %s", item.name, cart_id)
            await self._save(cart)

    async def remove_item(self, cart_id: int, item: LineItem) -> None:
        """Remove the first matching item; an absent item is only logged."""
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            if cart.remove_item(item):
                await self._save(cart)
                _logger.info("Removed product %s from cart %s", item.name, cart_id)
            else:
                _logger.warning("Attempted to remove non-existing product %s from cart %s", item.name, cart_id)

    async def view_cart(self, cart_id: int) -> list[LineItem]:
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            return cart.snapshot()

    async def clear_cart(self, cart_id: int) -> None:
        """Empty the cart. Clearing an empty cart is a no-op."""
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            cart.clear()
            await self._save(cart)

    async def checkout(self, cart_id: int) -> SagaResult:
        """Run the checkout saga; the cart is cleared only if it commits.

        The cart's lock is held for the whole saga, so no other operation on
        the same cart interleaves with it. On failure the items are kept and
        checkout can simply be called again.
        """
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            if cart.is_empty:
                return SagaResult.failed(NOTHING_IN_CART)

            result = await self._checkout_strategy.checkout(cart_id, self._on_commit(cart))
            self._log_result(cart_id, result)
            return result

    async def resume_checkout(self, cart_id: int, workflow_id: str) -> SagaResult:
        """Resume an interrupted checkout workflow.

        The cart is cleared only if the workflow commits and its commit was
        not applied to the cart before.
        """
        async with self._lock(cart_id):
            cart = await self._load(cart_id)
            result = await self._checkout_strategy.resume(cart_id, workflow_id, self._on_commit(cart))
            self._log_result(cart_id, result)
            return result

    async def recover_checkouts(self, cart_id: int | None = None) -> dict[str, SagaResult]:
        """Resume every checkout a crash left unfinished.

        Meant to run at startup, before the host takes new requests.

        Args:
            cart_id: Only recover this cart; all carts when None.

        Returns:
            Result of each resumed workflow by workflow id.
        """
        results = {}
        for owner, workflow_id in await self._checkout_strategy.unfinished(cart_id):
            _logger.info("Recovering checkout workflow %s of cart %s", workflow_id, owner)
            results[workflow_id] = await self.resume_checkout(owner, workflow_id)
        return results

    async def close(self) -> None:
        while self._resources:
            await self._resources.pop().close()

    async def __aenter__(self) -> 'CartEntityHost':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _on_commit(self, cart: Cart) -> OnCommit:
        async def clear() -> None:
            _logger.info("Checkout was successful. Clearing cart %s", cart.id)
            cart.clear()
            await self._save(cart)
        return clear

    @staticmethod
    def _log_result(cart_id: int, result: SagaResult) -> None:
        if not result.success:
            _logger.warning("Checkout of cart %s failed: %s", cart_id, result.error)

    def _lock(self, cart_id: int) -> asyncio.Lock:
        lock = self._locks.get(cart_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[cart_id] = lock
        return lock

    async def _load(self, cart_id: int) -> Cart:
        return Cart.restore(cart_id, await self._repository.get(cart_id))

    async def _save(self, cart: Cart) -> None:
        if cart.is_dirty:
            await self._repository.save(cart.id, cart.export())
            cart.mark_clean()

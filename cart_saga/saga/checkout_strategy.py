"""Checkout strategies - how a cart entity gets its saga run."""

import typing
from abc import ABCMeta, abstractmethod

from cart_saga.saga.checkout_saga import CheckoutSaga
from cart_saga.saga.compensation_registry import CompensationRegistry
from cart_saga.saga.errors import InvalidOperationError
from cart_saga.saga.saga_result import SagaResult
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.saga.step_runner import InProcessStepRunner


__all__ = (
    'ICheckoutStrategy',
    'InProcessCheckout',
    'OnCommit',
)


# Applies a committed checkout to the cart (clears it).
OnCommit = typing.Callable[[], typing.Awaitable[None]]


class ICheckoutStrategy(metaclass=ABCMeta):
    """Runs one full checkout saga for a non-empty cart.

    The cart itself stays with the entity that owns it: a strategy calls
    ``on_commit`` once when the saga commits, and never for a failed one.
    """

    @abstractmethod
    async def checkout(self, cart_id: int, on_commit: OnCommit) -> SagaResult:
        raise NotImplementedError

    async def resume(self, cart_id: int, workflow_id: str, on_commit: OnCommit) -> SagaResult:
        """Finish a checkout that was interrupted mid-saga."""
        raise InvalidOperationError("%s cannot resume checkouts" % type(self).__name__)

    async def unfinished(self, cart_id: int | None = None) -> list[tuple[int, str]]:
        """(cart id, workflow id) of every checkout waiting for a resume."""
        return []


class InProcessCheckout(ICheckoutStrategy):
    """The saga loops through its steps inside the calling entity invocation."""

    def __init__(self, executor: StepExecutor, compensations: CompensationRegistry):
        self._executor = executor
        self._compensations = compensations

    async def checkout(self, cart_id: int, on_commit: OnCommit) -> SagaResult:
        saga = CheckoutSaga(cart_id, InProcessStepRunner(self._executor, self._compensations))
        result = await saga.run()
        if result.success:
            await on_commit()
        return result

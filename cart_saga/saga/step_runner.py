"""Step runners - how the saga gets its steps executed."""

from abc import ABCMeta, abstractmethod

from cart_saga.saga.compensation_registry import CompensationRegistry
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.saga.step_outcome import StepOutcome


__all__ = (
    'IStepRunner',
    'InProcessStepRunner',
)


class IStepRunner(metaclass=ABCMeta):
    """Executes saga steps and their compensations on behalf of CheckoutSaga.

    The saga's state machine does not depend on whether the steps run
    inline or are dispatched to a durable workflow engine.
    """

    @abstractmethod
    async def run_step(self, step_name: str) -> StepOutcome:
        """Run a forward step to its final outcome (retries included)."""
        raise NotImplementedError

    @abstractmethod
    async def compensate(self, step_name: str, cart_id: int) -> bool:
        """Undo a completed step, best-effort. Returns True on success."""
        raise NotImplementedError


class InProcessStepRunner(IStepRunner):
    """Runs steps inline, blocking the checkout call for the whole saga."""

    def __init__(self, executor: StepExecutor, compensations: CompensationRegistry):
        self._executor = executor
        self._compensations = compensations

    async def run_step(self, step_name: str) -> StepOutcome:
        return await self._executor.execute(step_name)

    async def compensate(self, step_name: str, cart_id: int) -> bool:
        return await self._compensations.compensate(step_name, cart_id)

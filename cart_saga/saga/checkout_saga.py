"""Checkout saga - the payment/shipping state machine."""

import logging

from cart_saga.saga.errors import InvalidOperationError
from cart_saga.saga.saga_result import (
    CHECKOUT_SUCCEEDED, PAYMENT_FAILED, SHIPPING_FAILED, SagaResult
)
from cart_saga.saga.saga_state import SagaState
from cart_saga.saga.step_client import PAYMENT, SHIPPING
from cart_saga.saga.step_runner import IStepRunner


__all__ = (
    'CheckoutSaga',
    'CHECKOUT_STEPS',
)


_logger = logging.getLogger(__name__)


# (step name, state while the step is in flight, error reported when it fails)
CHECKOUT_STEPS: tuple[tuple[str, SagaState, str], ...] = (
    (PAYMENT, SagaState.PAYMENT_IN_FLIGHT, PAYMENT_FAILED),
    (SHIPPING, SagaState.SHIPPING_IN_FLIGHT, SHIPPING_FAILED),
)


class CheckoutSaga:
    """A single checkout attempt for one cart.

    Runs payment, then shipping. If shipping fails after payment
    succeeded, the payment is compensated. One instance is created per
    attempt, like a routing slip; the caller is responsible for holding
    the cart's lock and for clearing the cart when the result succeeds.

    States:
        IDLE -> PAYMENT_IN_FLIGHT -> SHIPPING_IN_FLIGHT -> COMMITTED
        IDLE -> PAYMENT_IN_FLIGHT -> FAILED
        IDLE -> PAYMENT_IN_FLIGHT -> SHIPPING_IN_FLIGHT -> COMPENSATING -> FAILED
        IDLE -> PAYMENT_IN_FLIGHT -> COMPENSATING -> FAILED  (the runner raised)
    """

    def __init__(self, cart_id: int, runner: IStepRunner):
        """Initialize checkout saga.

        Args:
            cart_id: The cart being checked out.
            runner: Executes the steps and compensations.
        """
        self._cart_id: int = cart_id
        self._runner: IStepRunner = runner
        self._state: SagaState = SagaState.IDLE
        self._history: list[SagaState] = [SagaState.IDLE]
        self._completed_steps: list[str] = []

    @property
    def cart_id(self) -> int:
        return self._cart_id

    @property
    def state(self) -> SagaState:
        return self._state

    @property
    def history(self) -> list[SagaState]:
        """States visited so far, in order."""
        return list(self._history)

    @property
    def completed_steps(self) -> list[str]:
        return list(self._completed_steps)

    async def run(self) -> SagaResult:
        """Drive the saga to a terminal state.

        Returns:
            The terminal result. Step faults never escape as exceptions.

        Raises:
            InvalidOperationError: If this saga has already been run.
        """
        if self._state is not SagaState.IDLE:
            raise InvalidOperationError("Checkout saga for cart %s has already run" % self._cart_id)

        for step_name, in_flight, error in CHECKOUT_STEPS:
            self._transition(in_flight)
            try:
                outcome = await self._runner.run_step(step_name)
            except Exception:
                # The step may have taken effect before the runner failed.
                _logger.error(
                    "Step %s raised for cart %s, compensating it as possibly done",
                    step_name, self._cart_id, exc_info=True
                )
                return await self._fail(error, self._completed_steps + [step_name])
            if not outcome.is_success:
                return await self._fail(error, self._completed_steps)
            self._completed_steps.append(step_name)

        self._transition(SagaState.COMMITTED)
        _logger.info("Checkout committed for cart %s", self._cart_id)
        return SagaResult.succeeded(CHECKOUT_SUCCEEDED)

    async def _fail(self, error: str, to_compensate: list[str]) -> SagaResult:
        await self._rollback(to_compensate)
        self._transition(SagaState.FAILED)
        _logger.warning("Checkout failed for cart %s: %s", self._cart_id, error)
        return SagaResult.failed(error)

    async def _rollback(self, steps: list[str]) -> None:
        if not steps:
            return
        self._transition(SagaState.COMPENSATING)
        for step_name in reversed(steps):
            _logger.warning("Compensating %s for cart %s", step_name, self._cart_id)
            try:
                await self._runner.compensate(step_name, self._cart_id)
            except Exception:
                _logger.error("Compensation of %s raised for cart %s", step_name, self._cart_id, exc_info=True)

    def _transition(self, state: SagaState) -> None:
        _logger.debug("Cart %s checkout: %s -> %s", self._cart_id, self._state.value, state.value)
        self._state = state
        self._history.append(state)

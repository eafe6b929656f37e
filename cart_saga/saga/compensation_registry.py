"""Compensation registry - maps completed steps to their undo actions."""

import logging
import typing

from cart_saga.saga.errors import CompensationFault
from cart_saga.saga.step_client import IStepClient, PAYMENT, REVERSE_PAYMENT


__all__ = (
    'Compensation',
    'CompensationRegistry',
    'ReversePayment',
    'default_compensation_registry',
)


_logger = logging.getLogger(__name__)

Compensation = typing.Callable[[int], typing.Awaitable[None]]


class CompensationRegistry:
    """Open mapping from step name to the action that undoes it.

    Compensations are best-effort: each runs once, and its faults are
    logged instead of being raised. The registry is read-only once built
    and may be shared between carts.
    """

    def __init__(self, compensations: dict[str, Compensation] | None = None):
        self._compensations: dict[str, Compensation] = dict(compensations or {})

    def register(self, step_name: str, compensation: Compensation) -> None:
        """Register the compensation of a step, replacing any previous one."""
        self._compensations[step_name] = compensation

    def has(self, step_name: str) -> bool:
        return step_name in self._compensations

    def get(self, step_name: str) -> Compensation | None:
        return self._compensations.get(step_name)

    async def compensate(self, step_name: str, cart_id: int) -> bool:
        """Run the compensation of a completed step once.

        Args:
            step_name: The step to undo.
            cart_id: The cart whose checkout is being rolled back.

        Returns:
            True if the compensation ran without error, False otherwise
            (including when no compensation is registered).
        """
        compensation = self._compensations.get(step_name)
        if compensation is None:
            _logger.warning("No compensation registered for %s", step_name)
            return False
        try:
            await compensation(cart_id)
        except Exception:
            _logger.error("Compensation of %s failed for cart %s", step_name, cart_id, exc_info=True)
            return False
        _logger.info("Compensated %s for cart %s", step_name, cart_id)
        return True


class ReversePayment:
    """Reverses a payment through the payment backend."""

    def __init__(self, client: IStepClient):
        self._client = client

    async def __call__(self, cart_id: int) -> None:
        outcome = await self._client.invoke(REVERSE_PAYMENT)
        if not outcome.is_success:
            raise CompensationFault("Payment reversal failed: %s" % outcome.reason)
        _logger.info("Payment reversed for cart %s due to shipping failure", cart_id)


def default_compensation_registry(client: IStepClient) -> CompensationRegistry:
    return CompensationRegistry({PAYMENT: ReversePayment(client)})

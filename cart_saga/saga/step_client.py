"""Step client - capability for invoking an external saga step."""

from abc import ABCMeta, abstractmethod

from cart_saga.saga.step_outcome import StepOutcome


__all__ = (
    'IStepClient',
    'PAYMENT',
    'SHIPPING',
    'REVERSE_PAYMENT',
)


PAYMENT = 'payment'
SHIPPING = 'shipping'
REVERSE_PAYMENT = 'reverse-payment'


class IStepClient(metaclass=ABCMeta):
    """Narrow request/response contract of the payment and shipping backends."""

    @abstractmethod
    async def invoke(self, step_name: str) -> StepOutcome:
        """Perform the step once.

        Args:
            step_name: Name of the step, e.g. "payment" or "shipping".

        Returns:
            Success, or Failure if the backend answered with an error.

        Raises:
            TransportFault: If the backend could not be reached.
        """
        raise NotImplementedError

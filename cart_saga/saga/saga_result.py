"""Saga result - terminal, user-facing outcome of a checkout."""

import dataclasses


__all__ = (
    'SagaResult',
    'NOTHING_IN_CART',
    'PAYMENT_FAILED',
    'SHIPPING_FAILED',
    'CHECKOUT_SUCCEEDED',
)


NOTHING_IN_CART = "Nothing in cart."
PAYMENT_FAILED = "Payment processing failed."
SHIPPING_FAILED = "Shipping processing failed."
CHECKOUT_SUCCEEDED = "Checkout processing success"


@dataclasses.dataclass(frozen=True)
class SagaResult:
    success: bool
    message: str = ''
    error: str = ''

    @classmethod
    def succeeded(cls, message: str) -> 'SagaResult':
        return cls(True, message=message)

    @classmethod
    def failed(cls, error: str) -> 'SagaResult':
        return cls(False, error=error)

    def export(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def restore(cls, state: dict) -> 'SagaResult':
        return cls(state['success'], state.get('message', ''), state.get('error', ''))

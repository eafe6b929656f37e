"""States of the checkout saga."""

import enum


__all__ = (
    'SagaState',
)


class SagaState(enum.Enum):
    IDLE = 'idle'
    PAYMENT_IN_FLIGHT = 'payment_in_flight'
    SHIPPING_IN_FLIGHT = 'shipping_in_flight'
    COMPENSATING = 'compensating'
    COMMITTED = 'committed'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (SagaState.COMMITTED, SagaState.FAILED)

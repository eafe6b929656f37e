from cart_saga.infrastructure.http_step_client import HttpStepClient


__all__ = (
    'HttpStepClient',
)

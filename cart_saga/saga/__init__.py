"""Checkout saga engine.

Checkout is a two-step distributed transaction: payment, then shipping.
Each step calls an external backend through an IStepClient and is retried
according to a RetryPolicy. If shipping fails after payment succeeded, the
payment is compensated, so the transaction leaves no partial effect.

Key Components:
- StepExecutor: Runs one step with retries and a per-attempt timeout
- CompensationRegistry: Step name -> compensating action
- CheckoutSaga: The per-attempt state machine
- IStepRunner: Where steps run (inline, or through a durable workflow)

Example:
    executor = StepExecutor(client, RetryPolicy.fixed(3, 1.0))
    runner = InProcessStepRunner(executor, default_compensation_registry(client))
    result = await CheckoutSaga(cart_id, runner).run()
"""

from cart_saga.saga.checkout_saga import CHECKOUT_STEPS, CheckoutSaga
from cart_saga.saga.checkout_strategy import ICheckoutStrategy, InProcessCheckout, OnCommit
from cart_saga.saga.compensation_registry import (
    Compensation, CompensationRegistry, ReversePayment, default_compensation_registry
)
from cart_saga.saga.errors import CompensationFault, InvalidOperationError, TransportFault
from cart_saga.saga.retry_policy import (
    DEFAULT_RETRY_POLICY, RetryPolicy, exponential_backoff, fixed_backoff
)
from cart_saga.saga.saga_result import SagaResult
from cart_saga.saga.saga_state import SagaState
from cart_saga.saga.step_client import IStepClient, PAYMENT, REVERSE_PAYMENT, SHIPPING
from cart_saga.saga.step_executor import DEFAULT_STEP_TIMEOUT, StepExecutor
from cart_saga.saga.step_outcome import Failure, StepOutcome, Success
from cart_saga.saga.step_runner import InProcessStepRunner, IStepRunner


__all__ = (
    'CHECKOUT_STEPS',
    'CheckoutSaga',
    'Compensation',
    'CompensationFault',
    'CompensationRegistry',
    'DEFAULT_RETRY_POLICY',
    'DEFAULT_STEP_TIMEOUT',
    'Failure',
    'ICheckoutStrategy',
    'InProcessCheckout',
    'InProcessStepRunner',
    'InvalidOperationError',
    'IStepClient',
    'IStepRunner',
    'OnCommit',
    'PAYMENT',
    'REVERSE_PAYMENT',
    'RetryPolicy',
    'ReversePayment',
    'SHIPPING',
    'SagaResult',
    'SagaState',
    'StepExecutor',
    'StepOutcome',
    'Success',
    'TransportFault',
    'default_compensation_registry',
    'exponential_backoff',
    'fixed_backoff',
)

"""Example step clients for demonstrating the checkout saga.

- FlakyStepClient: Fails every other call of a step, like an unreliable
  payment or carrier backend
- AlwaysFailingStepClient: Never succeeds, for exercising compensation
"""

from cart_saga.saga.examples.flaky_step_client import AlwaysFailingStepClient, FlakyStepClient


__all__ = (
    'AlwaysFailingStepClient',
    'FlakyStepClient',
)

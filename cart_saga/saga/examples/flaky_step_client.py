"""Flaky step client - simulated unreliable backends."""

from cart_saga.saga.step_client import IStepClient
from cart_saga.saga.step_outcome import Failure, StepOutcome, Success


__all__ = (
    'AlwaysFailingStepClient',
    'FlakyStepClient',
)


class FlakyStepClient(IStepClient):
    """Fails every other call of each step.

    ``first_fails`` selects whether the first call of a step fails (the
    payment backend of the demo) or succeeds (the carrier backend).
    Steps not listed always succeed.
    """

    def __init__(self, first_fails: dict[str, bool] | None = None):
        self._first_fails: dict[str, bool] = dict(first_fails or {})
        self._calls: dict[str, int] = {}

    def call_count(self, step_name: str) -> int:
        return self._calls.get(step_name, 0)

    async def invoke(self, step_name: str) -> StepOutcome:
        count = self._calls.get(step_name, 0) + 1
        self._calls[step_name] = count
        if step_name not in self._first_fails:
            return Success("%s processed successfully." % step_name.capitalize())
        fails_on_odd = self._first_fails[step_name]
        if (count % 2 == 1) == fails_on_odd:
            return Failure("Simulated %s processing failure." % step_name)
        return Success("%s processed successfully." % step_name.capitalize())


class AlwaysFailingStepClient(IStepClient):
    """Fails the given steps on every call; other steps succeed."""

    def __init__(self, failing_steps: tuple[str, ...]):
        self._failing_steps = frozenset(failing_steps)

    async def invoke(self, step_name: str) -> StepOutcome:
        if step_name in self._failing_steps:
            return Failure("Simulated %s processing failure." % step_name)
        return Success("%s processed successfully." % step_name.capitalize())

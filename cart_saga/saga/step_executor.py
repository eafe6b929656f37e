"""Step executor - runs one saga step with retries."""

import asyncio
import logging
import typing

from cart_saga.saga.retry_policy import DEFAULT_RETRY_POLICY, RetryPolicy
from cart_saga.saga.step_client import IStepClient
from cart_saga.saga.step_outcome import Failure, StepOutcome


__all__ = (
    'AttemptCallback',
    'StepExecutor',
    'DEFAULT_STEP_TIMEOUT',
)


_logger = logging.getLogger(__name__)

DEFAULT_STEP_TIMEOUT = 300.0

AttemptCallback = typing.Callable[[str, int, StepOutcome], typing.Awaitable[None]]

Sleep = typing.Callable[[float], typing.Awaitable[typing.Any]]


class StepExecutor:
    """Invokes a step through a step client, applying a retry policy.

    Failure responses, transport faults and timeouts all count as failed
    attempts. Nothing is raised to the caller: the final result is always
    a StepOutcome.
    """

    def __init__(
            self,
            client: IStepClient,
            policy: RetryPolicy = DEFAULT_RETRY_POLICY,
            timeout: float | None = DEFAULT_STEP_TIMEOUT,
            sleep: Sleep = asyncio.sleep,
    ):
        """Initialize step executor.

        Args:
            client: Client used to reach the backend.
            policy: Retry policy applied to every step.
            timeout: Ceiling in seconds for a single attempt, None for no limit.
            sleep: Coroutine used to wait between attempts.
        """
        self._client: IStepClient = client
        self._policy: RetryPolicy = policy
        self._timeout: float | None = timeout
        self._sleep: Sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def execute(self, step_name: str, on_attempt: AttemptCallback | None = None) -> StepOutcome:
        """Execute the step until it succeeds or the attempts run out.

        Args:
            step_name: Name of the step to invoke.
            on_attempt: Optional coroutine called after every attempt.

        Returns:
            Success of the first successful attempt, or Failure of the last one.
        """
        max_attempts = self._policy.max_attempts
        attempt = 1
        while True:
            _logger.info("Attempting %s (attempt %d/%d)", step_name, attempt, max_attempts)
            outcome = await self._attempt(step_name)
            if on_attempt is not None:
                await on_attempt(step_name, attempt, outcome)

            if outcome.is_success:
                _logger.info("%s processed successfully", step_name.capitalize())
                return outcome

            _logger.warning(
                "%s attempt %d/%d failed (%s): %s",
                step_name.capitalize(), attempt, max_attempts, outcome.kind, outcome.reason
            )
            if attempt >= max_attempts:
                _logger.warning("%s processing failed after %d attempt(s)", step_name.capitalize(), attempt)
                return Failure(
                    "%s failed after %d attempt(s): %s" % (step_name, attempt, outcome.reason),
                    outcome.kind,
                )

            delay = self._policy.backoff(attempt)
            _logger.info("Retrying %s in %ss", step_name, delay)
            await self._sleep(delay)
            attempt += 1

    async def _attempt(self, step_name: str) -> StepOutcome:
        try:
            if self._timeout is None:
                return await self._client.invoke(step_name)
            return await asyncio.wait_for(self._client.invoke(step_name), self._timeout)
        except asyncio.TimeoutError:
            return Failure("transport fault: timed out after %ss" % self._timeout, 'transport')
        except Exception as e:
            return Failure("transport fault: %s: %s" % (type(e).__name__, e), 'transport')

"""Retry policy - attempt budget and backoff for a single step."""

import dataclasses
import typing


__all__ = (
    'Backoff',
    'RetryPolicy',
    'fixed_backoff',
    'exponential_backoff',
    'DEFAULT_RETRY_POLICY',
)


Backoff = typing.Callable[[int], float]


def fixed_backoff(delay: float) -> Backoff:
    """Same delay (in seconds) after every failed attempt."""
    def backoff(attempt: int) -> float:
        return delay
    return backoff


def exponential_backoff(initial: float, factor: float = 2.0, maximum: float | None = None) -> Backoff:
    """Delay grows as ``initial * factor ** (attempt - 1)``, capped by ``maximum``."""
    def backoff(attempt: int) -> float:
        delay = initial * factor ** (attempt - 1)
        if maximum is not None:
            delay = min(delay, maximum)
        return delay
    return backoff


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """How many times a step is attempted and how long to wait in between.

    ``backoff`` receives the number of the attempt that just failed
    (starting at 1) and returns the delay in seconds.
    """
    max_attempts: int = 3
    backoff: Backoff = fixed_backoff(1.0)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1, got %r" % self.max_attempts)

    @classmethod
    def fixed(cls, max_attempts: int, delay: float) -> 'RetryPolicy':
        return cls(max_attempts, fixed_backoff(delay))

    @classmethod
    def exponential(cls, max_attempts: int, initial: float, factor: float = 2.0,
                    maximum: float | None = None) -> 'RetryPolicy':
        return cls(max_attempts, exponential_backoff(initial, factor, maximum))


DEFAULT_RETRY_POLICY = RetryPolicy.fixed(3, 1.0)

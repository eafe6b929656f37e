"""Step outcome - result of one external saga step."""

import dataclasses
import typing


__all__ = (
    'FailureKind',
    'StepOutcome',
    'Success',
    'Failure',
)


FailureKind = typing.Literal['response', 'transport']


@dataclasses.dataclass(frozen=True)
class Success:
    message: str = ''

    @property
    def is_success(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True)
class Failure:
    """A step that did not complete.

    ``kind`` tells an explicit failure response from the backend
    apart from a transport fault (network error, timeout).
    """
    reason: str
    kind: FailureKind = 'response'

    @property
    def is_success(self) -> bool:
        return False


StepOutcome = Success | Failure

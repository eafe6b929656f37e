"""Activity record - one entry of a workflow's append-only history."""

import enum
import typing


__all__ = (
    'ActivityRecord',
    'RecordKind',
)


class RecordKind(str, enum.Enum):
    STARTED = 'started'
    ATTEMPT = 'attempt'
    COMPLETED = 'completed'
    FAILED = 'failed'
    COMPENSATED = 'compensated'
    COMPENSATION_FAILED = 'compensation_failed'
    RESULT = 'result'
    FINALIZED = 'finalized'


class ActivityRecord:
    """Record of something that happened in a workflow.

    Stores what happened to which step, so that a resumed workflow can
    rebuild its state from the log instead of repeating committed steps.
    """

    def __init__(
            self,
            workflow_id: str,
            kind: RecordKind,
            step_name: str | None = None,
            attempt: int | None = None,
            data: dict[str, typing.Any] | None = None,
    ):
        """Initialize activity record.

        Args:
            workflow_id: The workflow this record belongs to.
            kind: What happened.
            step_name: The step concerned, if any.
            attempt: Attempt number for ATTEMPT records.
            data: Payload (outcome message/reason, cart id, saga result).
        """
        self._workflow_id: str = workflow_id
        self._kind: RecordKind = RecordKind(kind)
        self._step_name: str | None = step_name
        self._attempt: int | None = attempt
        self._data: dict[str, typing.Any] = dict(data or {})

    @property
    def workflow_id(self) -> str:
        return self._workflow_id

    @property
    def kind(self) -> RecordKind:
        return self._kind

    @property
    def step_name(self) -> str | None:
        return self._step_name

    @property
    def attempt(self) -> int | None:
        return self._attempt

    @property
    def data(self) -> dict[str, typing.Any]:
        return self._data

    def export(self) -> dict:
        return {
            'workflow_id': self._workflow_id,
            'kind': self._kind.value,
            'step_name': self._step_name,
            'attempt': self._attempt,
            'data': dict(self._data),
        }

    @classmethod
    def restore(cls, state: dict) -> 'ActivityRecord':
        return cls(
            state['workflow_id'],
            RecordKind(state['kind']),
            state.get('step_name'),
            state.get('attempt'),
            state.get('data'),
        )

    def __eq__(self, other):
        if not isinstance(other, ActivityRecord):
            return NotImplemented
        return self.export() == other.export()

    def __repr__(self):
        return "ActivityRecord(%r, %s, step=%r, attempt=%r, data=%r)" % (
            self._workflow_id, self._kind.value, self._step_name, self._attempt, self._data
        )

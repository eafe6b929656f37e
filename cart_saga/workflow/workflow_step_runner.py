"""Workflow step runner - steps as replayable activities."""

import logging

from cart_saga.saga.compensation_registry import CompensationRegistry
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.saga.step_outcome import Failure, StepOutcome, Success
from cart_saga.saga.step_runner import IStepRunner
from cart_saga.workflow.activity_log import IActivityLog
from cart_saga.workflow.activity_record import ActivityRecord, RecordKind


__all__ = (
    'WorkflowStepRunner',
)


_logger = logging.getLogger(__name__)


class WorkflowStepRunner(IStepRunner):
    """Runs saga steps as activities recorded in an activity log.

    Before executing anything the runner consults the workflow's history:
    a step whose final outcome is already recorded is replayed from the
    log rather than executed again, and a compensation that already ran
    is not repeated. New attempts, outcomes and compensations are appended.
    """

    def __init__(
            self,
            workflow_id: str,
            executor: StepExecutor,
            log: IActivityLog,
            compensations: CompensationRegistry,
            history: list[ActivityRecord] | None = None,
    ):
        """Initialize workflow step runner.

        Args:
            workflow_id: The workflow whose activities are run.
            executor: Executes steps that have no recorded outcome yet.
            log: Where the history is appended.
            compensations: Compensations for completed steps.
            history: Records already in the log for this workflow.
        """
        self._workflow_id: str = workflow_id
        self._executor: StepExecutor = executor
        self._log: IActivityLog = log
        self._compensations: CompensationRegistry = compensations
        self._history: list[ActivityRecord] = list(history or [])

    async def run_step(self, step_name: str) -> StepOutcome:
        recorded = self._find(step_name, RecordKind.COMPLETED, RecordKind.FAILED)
        if recorded is not None:
            _logger.info("Replaying %s of workflow %s from the log", step_name, self._workflow_id)
            return self._outcome_of(recorded)

        previous_attempts = sum(
            1 for r in self._history if r.kind is RecordKind.ATTEMPT and r.step_name == step_name
        )

        async def on_attempt(name: str, attempt: int, outcome: StepOutcome) -> None:
            await self._append(RecordKind.ATTEMPT, name, previous_attempts + attempt, self._data_of(outcome))

        outcome = await self._executor.execute(step_name, on_attempt)
        kind = RecordKind.COMPLETED if outcome.is_success else RecordKind.FAILED
        await self._append(kind, step_name, data=self._data_of(outcome))
        return outcome

    async def compensate(self, step_name: str, cart_id: int) -> bool:
        recorded = self._find(step_name, RecordKind.COMPENSATED, RecordKind.COMPENSATION_FAILED)
        if recorded is not None:
            _logger.info("Compensation of %s in workflow %s already ran", step_name, self._workflow_id)
            return recorded.kind is RecordKind.COMPENSATED

        compensated = await self._compensations.compensate(step_name, cart_id)
        kind = RecordKind.COMPENSATED if compensated else RecordKind.COMPENSATION_FAILED
        await self._append(kind, step_name)
        return compensated

    def _find(self, step_name: str, *kinds: RecordKind) -> ActivityRecord | None:
        for record in self._history:
            if record.step_name == step_name and record.kind in kinds:
                return record
        return None

    async def _append(self, kind: RecordKind, step_name: str, attempt: int | None = None,
                      data: dict | None = None) -> None:
        record = ActivityRecord(self._workflow_id, kind, step_name, attempt, data)
        await self._log.append(record)
        self._history.append(record)

    @staticmethod
    def _data_of(outcome: StepOutcome) -> dict:
        if isinstance(outcome, Success):
            return {'success': True, 'message': outcome.message}
        return {'success': False, 'reason': outcome.reason, 'kind': outcome.kind}

    @staticmethod
    def _outcome_of(record: ActivityRecord) -> StepOutcome:
        if record.kind is RecordKind.COMPLETED:
            return Success(record.data.get('message', ''))
        return Failure(record.data.get('reason', ''), record.data.get('kind', 'response'))

"""Workflow engine - crash-safe execution of checkout sagas."""

import logging
import uuid

from cart_saga.saga.checkout_saga import CheckoutSaga
from cart_saga.saga.checkout_strategy import ICheckoutStrategy, OnCommit
from cart_saga.saga.compensation_registry import CompensationRegistry
from cart_saga.saga.errors import InvalidOperationError
from cart_saga.saga.saga_result import SagaResult
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.workflow.activity_log import IActivityLog
from cart_saga.workflow.activity_record import ActivityRecord, RecordKind
from cart_saga.workflow.workflow_step_runner import WorkflowStepRunner


__all__ = (
    'WorkflowEngine',
    'WorkflowCheckout',
)


_logger = logging.getLogger(__name__)


class WorkflowEngine:
    """Runs checkout sagas whose progress is kept in an activity log.

    A workflow is started once and may be run any number of times: every
    run rebuilds the saga from the log, so steps that already reached an
    outcome are not executed again and a finished workflow just reports
    its recorded result.
    """

    def __init__(self, executor: StepExecutor, compensations: CompensationRegistry, log: IActivityLog):
        self._executor = executor
        self._compensations = compensations
        self._log = log

    @property
    def log(self) -> IActivityLog:
        return self._log

    async def start(self, cart_id: int) -> str:
        """Register a new checkout workflow for the cart.

        Returns:
            The new workflow id.
        """
        workflow_id = "checkout-%s-%s" % (cart_id, uuid.uuid4().hex)
        await self._log.append(ActivityRecord(workflow_id, RecordKind.STARTED, data={'cart_id': cart_id}))
        _logger.info("Started workflow %s for cart %s", workflow_id, cart_id)
        return workflow_id

    async def run(self, workflow_id: str) -> SagaResult:
        """Run (or resume) a workflow to its terminal result.

        Raises:
            InvalidOperationError: If the workflow was never started.
        """
        history = await self._log.read(workflow_id)
        cart_id = self._cart_id_of(workflow_id, history)

        for record in history:
            if record.kind is RecordKind.RESULT:
                _logger.info("Workflow %s already finished", workflow_id)
                return SagaResult.restore(record.data)

        runner = WorkflowStepRunner(workflow_id, self._executor, self._log, self._compensations, history)
        result = await CheckoutSaga(cart_id, runner).run()
        await self._log.append(ActivityRecord(workflow_id, RecordKind.RESULT, data=result.export()))
        return result

    async def resume(self, workflow_id: str) -> SagaResult:
        _logger.info("Resuming workflow %s", workflow_id)
        return await self.run(workflow_id)

    async def finalize(self, workflow_id: str, on_commit: OnCommit) -> bool:
        """Apply a committed workflow to its cart, once.

        The FINALIZED record is appended after ``on_commit`` returns, so a
        crash in between repeats ``on_commit`` on the next resume.

        Returns:
            False if the workflow was already finalized.
        """
        history = await self._log.read(workflow_id)
        if any(record.kind is RecordKind.FINALIZED for record in history):
            _logger.info("Workflow %s was already finalized", workflow_id)
            return False
        await on_commit()
        await self._log.append(ActivityRecord(workflow_id, RecordKind.FINALIZED))
        return True

    async def unfinished(self, cart_id: int | None = None) -> list[tuple[int, str]]:
        result = []
        for workflow_id in await self._log.unfinished(cart_id):
            result.append((await self.cart_id_of(workflow_id), workflow_id))
        return result

    async def cart_id_of(self, workflow_id: str) -> int:
        return self._cart_id_of(workflow_id, await self._log.read(workflow_id))

    @staticmethod
    def _cart_id_of(workflow_id: str, history: list[ActivityRecord]) -> int:
        for record in history:
            if record.kind is RecordKind.STARTED:
                return record.data['cart_id']
        raise InvalidOperationError("Unknown workflow %s" % workflow_id)


class WorkflowCheckout(ICheckoutStrategy):
    """Each checkout starts a fresh workflow and waits for its result."""

    def __init__(self, engine: WorkflowEngine):
        self._engine = engine

    async def checkout(self, cart_id: int, on_commit: OnCommit) -> SagaResult:
        workflow_id = await self._engine.start(cart_id)
        return await self._complete(workflow_id, await self._engine.run(workflow_id), on_commit)

    async def resume(self, cart_id: int, workflow_id: str, on_commit: OnCommit) -> SagaResult:
        owner = await self._engine.cart_id_of(workflow_id)
        if owner != cart_id:
            raise InvalidOperationError("Workflow %s belongs to cart %s, not %s" % (workflow_id, owner, cart_id))
        return await self._complete(workflow_id, await self._engine.resume(workflow_id), on_commit)

    async def unfinished(self, cart_id: int | None = None) -> list[tuple[int, str]]:
        return await self._engine.unfinished(cart_id)

    async def _complete(self, workflow_id: str, result: SagaResult, on_commit: OnCommit) -> SagaResult:
        if result.success:
            await self._engine.finalize(workflow_id, on_commit)
        return result

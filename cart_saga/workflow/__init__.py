"""Durable workflow backend for the checkout saga.

Instead of retrying steps in memory only, each checkout becomes a workflow
whose activities (step attempts, outcomes, compensations, final result) are
appended to an IActivityLog. Running a workflow again after a crash
rebuilds the saga from that log: committed steps are replayed, not
re-executed.

Example:
    engine = WorkflowEngine(executor, compensations, InMemoryActivityLog())
    workflow_id = await engine.start(cart_id)
    result = await engine.run(workflow_id)
"""

from cart_saga.workflow.activity_log import IActivityLog, InMemoryActivityLog
from cart_saga.workflow.activity_record import ActivityRecord, RecordKind
from cart_saga.workflow.workflow_engine import WorkflowCheckout, WorkflowEngine
from cart_saga.workflow.workflow_step_runner import WorkflowStepRunner


__all__ = (
    'ActivityRecord',
    'IActivityLog',
    'InMemoryActivityLog',
    'RecordKind',
    'WorkflowCheckout',
    'WorkflowEngine',
    'WorkflowStepRunner',
)

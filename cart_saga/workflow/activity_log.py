"""Activity log - append-only history of workflows."""

import asyncio
import typing
from abc import ABCMeta, abstractmethod

from cart_saga.workflow.activity_record import ActivityRecord, RecordKind


__all__ = (
    'IActivityLog',
    'InMemoryActivityLog',
)


class IActivityLog(metaclass=ABCMeta):

    @abstractmethod
    async def append(self, record: ActivityRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def read(self, workflow_id: str) -> list[ActivityRecord]:
        """All records of a workflow in the order they were appended."""
        raise NotImplementedError

    @abstractmethod
    async def unfinished(self, cart_id: int | None = None) -> list[str]:
        """Workflows that still need a resume, oldest first.

        A workflow is unfinished while it has no result, or while its
        successful result has not been finalized on the cart yet.

        Args:
            cart_id: Only workflows of this cart; all carts when None.
        """
        raise NotImplementedError


class InMemoryActivityLog(IActivityLog):
    """Activity log kept in process memory.

    Survives workflow restarts within one process, which is enough for
    tests and single-process deployments.
    """

    def __init__(self):
        self._records: dict[str, list[dict[str, typing.Any]]] = {}
        self._lock = asyncio.Lock()

    async def append(self, record: ActivityRecord) -> None:
        async with self._lock:
            self._records.setdefault(record.workflow_id, []).append(record.export())

    async def read(self, workflow_id: str) -> list[ActivityRecord]:
        async with self._lock:
            return [ActivityRecord.restore(state) for state in self._records.get(workflow_id, ())]

    async def unfinished(self, cart_id: int | None = None) -> list[str]:
        async with self._lock:
            return [
                workflow_id for workflow_id, states in self._records.items()
                if self._is_unfinished([ActivityRecord.restore(state) for state in states], cart_id)
            ]

    def workflow_ids(self) -> list[str]:
        return list(self._records)

    @staticmethod
    def _is_unfinished(history: list[ActivityRecord], cart_id: int | None) -> bool:
        started = [r for r in history if r.kind is RecordKind.STARTED]
        if not started:
            return False
        if cart_id is not None and started[0].data.get('cart_id') != cart_id:
            return False
        for record in history:
            if record.kind is RecordKind.FINALIZED:
                return False
            if record.kind is RecordKind.RESULT and not record.data.get('success'):
                return False
        return True

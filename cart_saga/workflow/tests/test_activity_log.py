"""Tests for InMemoryActivityLog."""

from unittest import IsolatedAsyncioTestCase

from cart_saga.workflow.activity_log import InMemoryActivityLog
from cart_saga.workflow.activity_record import ActivityRecord, RecordKind


class InMemoryActivityLogTestCase(IsolatedAsyncioTestCase):

    def setUp(self) -> None:
        self.log = InMemoryActivityLog()

    async def test_read_unknown_workflow(self):
        self.assertEqual(await self.log.read("missing"), [])

    async def test_append_keeps_order_per_workflow(self):
        first = ActivityRecord("wf-1", RecordKind.STARTED, data={"cart_id": 1})
        other = ActivityRecord("wf-2", RecordKind.STARTED, data={"cart_id": 2})
        second = ActivityRecord("wf-1", RecordKind.ATTEMPT, "payment", 1)
        for record in (first, other, second):
            await self.log.append(record)

        self.assertEqual(await self.log.read("wf-1"), [first, second])
        self.assertEqual(await self.log.read("wf-2"), [other])
        self.assertEqual(self.log.workflow_ids(), ["wf-1", "wf-2"])

    async def test_records_cannot_be_changed_through_read(self):
        await self.log.append(ActivityRecord("wf-1", RecordKind.STARTED, data={"cart_id": 1}))

        (record,) = await self.log.read("wf-1")
        record.data["cart_id"] = 99

        (record,) = await self.log.read("wf-1")
        self.assertEqual(record.data["cart_id"], 1)

    async def test_unfinished(self):
        for record in (
            ActivityRecord("running", RecordKind.STARTED, data={"cart_id": 1}),
            ActivityRecord("failed", RecordKind.STARTED, data={"cart_id": 1}),
            ActivityRecord("failed", RecordKind.RESULT, data={"success": False, "error": "x"}),
            ActivityRecord("committed", RecordKind.STARTED, data={"cart_id": 2}),
            ActivityRecord("committed", RecordKind.RESULT, data={"success": True}),
            ActivityRecord("finalized", RecordKind.STARTED, data={"cart_id": 2}),
            ActivityRecord("finalized", RecordKind.RESULT, data={"success": True}),
            ActivityRecord("finalized", RecordKind.FINALIZED),
        ):
            await self.log.append(record)

        self.assertEqual(await self.log.unfinished(), ["running", "committed"])
        self.assertEqual(await self.log.unfinished(1), ["running"])
        self.assertEqual(await self.log.unfinished(3), [])

"""Tests for CartEntityHost with both checkout strategies."""

import asyncio
from unittest import IsolatedAsyncioTestCase, mock

from cart_saga.cart.errors import InvalidArgument
from cart_saga.cart.line_item import LineItem
from cart_saga.entity.cart_entity_host import CartEntityHost
from cart_saga.entity.repositories.in_memory_repository import InMemoryCartRepository
from cart_saga.saga.checkout_strategy import ICheckoutStrategy, InProcessCheckout
from cart_saga.saga.compensation_registry import default_compensation_registry
from cart_saga.saga.errors import InvalidOperationError
from cart_saga.saga.retry_policy import RetryPolicy
from cart_saga.saga.saga_result import SagaResult
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.saga.step_outcome import StepOutcome, Success
from cart_saga.saga.tests.step_clients import ScriptedStepClient, failures, no_sleep
from cart_saga.workflow.activity_log import InMemoryActivityLog
from cart_saga.workflow.workflow_engine import WorkflowCheckout, WorkflowEngine


class CartEntityHostTestCase(IsolatedAsyncioTestCase):
    """Runs against the in-process strategy; subclassed for the workflow one."""

    max_attempts = 3

    def _make_strategy(self, executor: StepExecutor, client) -> ICheckoutStrategy:
        return InProcessCheckout(executor, default_compensation_registry(client))

    def _make_host(self, client, repository=None) -> CartEntityHost:
        self.client = client
        self.repository = repository or InMemoryCartRepository()
        executor = StepExecutor(client, RetryPolicy.fixed(self.max_attempts, 1.0), sleep=no_sleep)
        return CartEntityHost(self.repository, self._make_strategy(executor, client))

    async def _fill(self, host: CartEntityHost, cart_id: int, *names: str) -> None:
        for name in names:
            await host.add_item(cart_id, LineItem(name))

    # Cart operations

    async def test_view_unknown_cart_is_empty(self):
        host = self._make_host(ScriptedStepClient())
        self.assertEqual(await host.view_cart(1), [])

    async def test_view_reflects_adds_minus_first_matching_removes(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a", "b", "a", "c")
        await host.remove_item(1, LineItem("a"))
        await host.remove_item(1, LineItem("c"))

        self.assertEqual(await host.view_cart(1), [LineItem("b"), LineItem("a")])

    async def test_remove_absent_item_is_logged(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")

        with self.assertLogs('cart_saga.entity.cart_entity_host', level='WARNING'):
            await host.remove_item(1, LineItem("z"))

        self.assertEqual(await host.view_cart(1), [LineItem("a")])

    async def test_add_invalid_item_changes_nothing(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")

        with self.assertRaises(InvalidArgument):
            await host.add_item(1, LineItem(""))

        self.assertEqual(await self.repository.get(1), {'items': [{'name': 'a'}]})

    async def test_view_returns_snapshot(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")

        view = await host.view_cart(1)
        view.append(LineItem("b"))

        self.assertEqual(await host.view_cart(1), [LineItem("a")])

    async def test_state_is_persisted_per_cart(self):
        repository = InMemoryCartRepository()
        host = self._make_host(ScriptedStepClient(), repository)
        await self._fill(host, 1, "a", "b")
        await self._fill(host, 2, "c")

        restarted = self._make_host(ScriptedStepClient(), repository)

        self.assertEqual(await restarted.view_cart(1), [LineItem("a"), LineItem("b")])
        self.assertEqual(await restarted.view_cart(2), [LineItem("c")])

    async def test_clear_cart_is_idempotent(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")

        await host.clear_cart(1)
        await host.clear_cart(1)
        await host.clear_cart(2)

        self.assertEqual(await host.view_cart(1), [])

    # Checkout

    async def test_checkout_empty_cart(self):
        host = self._make_host(ScriptedStepClient())

        result = await host.checkout(1)

        self.assertEqual(result, SagaResult(False, error="Nothing in cart."))
        self.assertEqual(self.client.calls, [])

    async def test_checkout_success_clears_cart(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a", "b")

        result = await host.checkout(1)

        self.assertEqual(result, SagaResult(True, message="Checkout processing success"))
        self.assertEqual(self.client.calls, ["payment", "shipping"])
        self.assertEqual(await host.view_cart(1), [])
        self.assertEqual(await self.repository.get(1), {'items': []})

    async def test_payment_failure_keeps_cart(self):
        host = self._make_host(ScriptedStepClient({"payment": failures(self.max_attempts)}))
        await self._fill(host, 1, "a", "b")

        result = await host.checkout(1)

        self.assertEqual(result, SagaResult(False, error="Payment processing failed."))
        self.assertEqual(self.client.calls, ["payment"] * self.max_attempts)
        self.assertEqual(await host.view_cart(1), [LineItem("a"), LineItem("b")])

    async def test_shipping_failure_compensates_once_and_keeps_cart(self):
        host = self._make_host(ScriptedStepClient({"shipping": failures(self.max_attempts)}))
        await self._fill(host, 1, "a")

        result = await host.checkout(1)

        self.assertEqual(result, SagaResult(False, error="Shipping processing failed."))
        self.assertEqual(self.client.count("reverse-payment"), 1)
        self.assertEqual(self.client.calls[-1], "reverse-payment")
        self.assertEqual(await host.view_cart(1), [LineItem("a")])

    async def test_checkout_again_reruns_full_saga(self):
        host = self._make_host(ScriptedStepClient({"shipping": failures(self.max_attempts)}))
        await self._fill(host, 1, "a")
        await host.checkout(1)
        self.client.calls.clear()

        result = await host.checkout(1)

        self.assertTrue(result.success)
        self.assertEqual(self.client.calls, ["payment", "shipping"])
        self.assertEqual(await host.view_cart(1), [])

    async def test_concurrent_checkouts_on_same_cart_do_not_interleave(self):
        client = ScriptedStepClient({"shipping": failures(self.max_attempts)}, delay=0.01)
        host = self._make_host(client)
        await self._fill(host, 1, "a")

        first, second = await asyncio.gather(host.checkout(1), host.checkout(1))

        self.assertEqual(first.error, "Shipping processing failed.")
        self.assertTrue(second.success)
        self.assertEqual(client.calls, (
            ["payment"] + ["shipping"] * self.max_attempts + ["reverse-payment"]
            + ["payment", "shipping"]
        ))

    async def test_mutation_waits_for_checkout(self):
        client = ScriptedStepClient(delay=0.01)
        host = self._make_host(client)
        await self._fill(host, 1, "a")

        result, _ = await asyncio.gather(host.checkout(1), host.add_item(1, LineItem("b")))

        self.assertTrue(result.success)
        self.assertEqual(await host.view_cart(1), [LineItem("b")])

    async def test_different_carts_run_in_parallel(self):
        client = RendezvousStepClient(parties=2)
        host = self._make_host(client)
        await self._fill(host, 1, "a")
        await self._fill(host, 2, "b")

        results = await asyncio.wait_for(asyncio.gather(host.checkout(1), host.checkout(2)), 5)

        self.assertTrue(all(r.success for r in results))


class WorkflowCartEntityHostTestCase(CartEntityHostTestCase):
    """Same behaviour when checkouts run as durable workflows."""

    def _make_strategy(self, executor: StepExecutor, client) -> ICheckoutStrategy:
        self.log = InMemoryActivityLog()
        self.engine = WorkflowEngine(executor, default_compensation_registry(client), self.log)
        return WorkflowCheckout(self.engine)

    async def test_resume_committed_workflow_clears_cart(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")
        # The workflow committed, but the process died before the cart was cleared.
        workflow_id = await self.engine.start(1)
        await self.engine.run(workflow_id)
        self.client.calls.clear()

        result = await host.resume_checkout(1, workflow_id)

        self.assertTrue(result.success)
        self.assertEqual(self.client.calls, [])
        self.assertEqual(await host.view_cart(1), [])

    async def test_resume_finalized_workflow_keeps_new_items(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")
        await host.checkout(1)
        (workflow_id,) = self.log.workflow_ids()
        await self._fill(host, 1, "new")

        result = await host.resume_checkout(1, workflow_id)

        self.assertTrue(result.success)
        self.assertEqual(await host.view_cart(1), [LineItem("new")])

    async def test_recover_checkouts_after_crash(self):
        host = self._make_host(ScriptedStepClient())
        await self._fill(host, 1, "a")
        await self._fill(host, 2, "b")
        # Cart 1 crashed before its saga ran, cart 2 after its commit.
        crashed = await self.engine.start(1)
        committed = await self.engine.start(2)
        await self.engine.run(committed)
        self.client.calls.clear()

        results = await host.recover_checkouts()

        self.assertEqual(set(results), {crashed, committed})
        self.assertTrue(all(r.success for r in results.values()))
        self.assertEqual(self.client.calls, ["payment", "shipping"])
        self.assertEqual(await host.view_cart(1), [])
        self.assertEqual(await host.view_cart(2), [])
        self.assertEqual(await host.recover_checkouts(), {})

    async def test_resume_failed_workflow_keeps_cart(self):
        host = self._make_host(ScriptedStepClient({"payment": failures(self.max_attempts)}))
        await self._fill(host, 1, "a")
        await host.checkout(1)
        (workflow_id,) = self.log.workflow_ids()

        result = await host.resume_checkout(1, workflow_id)

        self.assertEqual(result.error, "Payment processing failed.")
        self.assertEqual(await host.view_cart(1), [LineItem("a")])


class RendezvousStepClient(ScriptedStepClient):
    """Payment succeeds only once ``parties`` payments are in flight together."""

    def __init__(self, parties: int):
        super().__init__()
        self._parties = parties
        self._arrived = 0
        self._all_arrived = asyncio.Event()

    async def invoke(self, step_name: str) -> StepOutcome:
        if step_name == "payment":
            self._arrived += 1
            if self._arrived >= self._parties:
                self._all_arrived.set()
            await self._all_arrived.wait()
            return Success("paid")
        return await super().invoke(step_name)


class InProcessResumeTestCase(IsolatedAsyncioTestCase):

    async def test_resume_is_not_supported_in_process(self):
        client = ScriptedStepClient()
        executor = StepExecutor(client, sleep=no_sleep)
        host = CartEntityHost(
            InMemoryCartRepository(), InProcessCheckout(executor, default_compensation_registry(client))
        )
        with self.assertRaises(InvalidOperationError):
            await host.resume_checkout(1, "wf")

    async def test_nothing_to_recover_in_process(self):
        client = ScriptedStepClient()
        executor = StepExecutor(client, sleep=no_sleep)
        host = CartEntityHost(
            InMemoryCartRepository(), InProcessCheckout(executor, default_compensation_registry(client))
        )
        self.assertEqual(await host.recover_checkouts(), {})

    async def test_close_releases_resources_once(self):
        resource = mock.AsyncMock()
        client = ScriptedStepClient()
        executor = StepExecutor(client, sleep=no_sleep)
        async with CartEntityHost(
            InMemoryCartRepository(), InProcessCheckout(executor, default_compensation_registry(client)), [resource]
        ) as host:
            pass

        await host.close()

        resource.close.assert_awaited_once_with()

"""Wiring of a cart entity host from settings."""

from psycopg_pool import AsyncConnectionPool

from cart_saga.entity.cart_entity_host import CartEntityHost
from cart_saga.entity.interfaces import ICartRepository
from cart_saga.entity.repositories import InMemoryCartRepository, PgCartRepository
from cart_saga.infrastructure.http_step_client import HttpStepClient
from cart_saga.saga.checkout_strategy import ICheckoutStrategy, InProcessCheckout
from cart_saga.saga.compensation_registry import default_compensation_registry
from cart_saga.saga.step_client import IStepClient
from cart_saga.saga.step_executor import StepExecutor
from cart_saga.settings import Settings
from cart_saga.workflow.activity_log import IActivityLog, InMemoryActivityLog
from cart_saga.workflow.pg_activity_log import PgActivityLog
from cart_saga.workflow.workflow_engine import WorkflowCheckout, WorkflowEngine

__all__ = (
    'make_pg_pool',
    'make_cart_entity_host',
    'make_pg_cart_entity_host',
)


async def make_pg_pool(postgresql_url: str) -> AsyncConnectionPool:
    pool = AsyncConnectionPool(postgresql_url, open=False)
    await pool.open()
    return pool


def make_cart_entity_host(
        settings: Settings,
        client: IStepClient | None = None,
        repository: ICartRepository | None = None,
        activity_log: IActivityLog | None = None,
        durable: bool = False,
) -> CartEntityHost:
    """Build a host whose checkouts run in process or as durable workflows.

    Args:
        settings: Retry policy, timeouts and backend URLs.
        client: Step client; an HttpStepClient on the configured URLs by default,
            which the host closes in CartEntityHost.close().
        repository: Cart persistence; in memory by default.
        activity_log: Workflow history, used when durable; in memory by default.
        durable: Run checkouts through the workflow engine.
    """
    resources = []
    if client is None:
        client = HttpStepClient(settings.step_urls(), timeout=settings.step_timeout)
        resources.append(client)
    if repository is None:
        repository = InMemoryCartRepository()

    executor = StepExecutor(client, settings.retry_policy(), settings.step_timeout)
    compensations = default_compensation_registry(client)

    strategy: ICheckoutStrategy
    if durable:
        engine = WorkflowEngine(executor, compensations, activity_log or InMemoryActivityLog())
        strategy = WorkflowCheckout(engine)
    else:
        strategy = InProcessCheckout(executor, compensations)
    return CartEntityHost(repository, strategy, resources)


async def make_pg_cart_entity_host(
        settings: Settings,
        client: IStepClient | None = None,
        durable: bool = True,
) -> tuple[CartEntityHost, AsyncConnectionPool]:
    """Build a host that keeps carts and workflow history in PostgreSQL.

    The caller owns the returned pool and must close it.
    """
    if not settings.postgresql_url:
        raise ValueError("CART_SAGA_POSTGRESQL_URL is not configured")
    pool = await make_pg_pool(settings.postgresql_url)
    repository = PgCartRepository(pool)
    activity_log = PgActivityLog(pool)
    await repository.setup()
    await activity_log.setup()
    host = make_cart_entity_host(settings, client, repository, activity_log, durable)
    return host, pool

import typing

from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from cart_saga.entity.interfaces import ICartRepository


__all__ = ('PgCartRepository',)


class PgCartRepository(ICartRepository):
    _table: str = 'cart_saga_cart'

    def __init__(self, pool: AsyncConnectionPool, table: str | None = None):
        self._pool = pool
        if table is not None:
            self._table = table

    async def get(self, cart_id: int) -> dict[str, typing.Any] | None:
        sql = "SELECT state FROM %s WHERE id = %%(id)s" % self._table
        async with self._pool.connection() as conn:
            async with conn.cursor() as acursor:
                await acursor.execute(sql, {'id': cart_id})
                row = await acursor.fetchone()
        if row is None:
            return None
        return row[0]

    async def save(self, cart_id: int, state: dict[str, typing.Any]) -> None:
        sql = """
            INSERT INTO %s (id, state)
            VALUES (%%(id)s, %%(state)s)
            ON CONFLICT (id) DO UPDATE SET state = EXCLUDED.state
        """ % self._table
        async with self._pool.connection() as conn:
            async with conn.cursor() as acursor:
                await acursor.execute(sql, {'id': cart_id, 'state': Jsonb(state)})

    async def setup(self):
        sql = """
            CREATE TABLE IF NOT EXISTS %s (
                id bigint PRIMARY KEY,
                state jsonb NOT NULL
            )
        """ % self._table
        async with self._pool.connection() as conn:
            await conn.execute(sql)

    async def cleanup(self):
        async with self._pool.connection() as conn:
            await conn.execute("DROP TABLE IF EXISTS %s" % self._table)

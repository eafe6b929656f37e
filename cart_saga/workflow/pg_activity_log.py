"""PostgreSQL-backed activity log."""

import typing

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from cart_saga.workflow.activity_log import IActivityLog
from cart_saga.workflow.activity_record import ActivityRecord, RecordKind


__all__ = (
    'PgActivityLog',
)


class PgActivityLog(IActivityLog):
    _table: str = 'cart_saga_activity_log'

    def __init__(self, pool: AsyncConnectionPool, table: str | None = None):
        self._pool = pool
        if table is not None:
            self._table = table

    async def append(self, record: ActivityRecord) -> None:
        sql = """
            INSERT INTO %s (workflow_id, kind, step_name, attempt, data)
            VALUES (%%(workflow_id)s, %%(kind)s, %%(step_name)s, %%(attempt)s, %%(data)s)
        """ % self._table
        async with self._pool.connection() as conn:
            async with conn.cursor() as acursor:
                await acursor.execute(sql, {
                    'workflow_id': record.workflow_id,
                    'kind': record.kind.value,
                    'step_name': record.step_name,
                    'attempt': record.attempt,
                    'data': Jsonb(record.data),
                })

    async def read(self, workflow_id: str) -> list[ActivityRecord]:
        sql = """
            SELECT workflow_id, kind, step_name, attempt, data
            FROM %s
            WHERE workflow_id = %%(workflow_id)s
            ORDER BY id
        """ % self._table
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as acursor:
                await acursor.execute(sql, {'workflow_id': workflow_id})
                rows: list[dict[str, typing.Any]] = await acursor.fetchall()
        return [
            ActivityRecord(
                row['workflow_id'], RecordKind(row['kind']), row['step_name'], row['attempt'], row['data']
            )
            for row in rows
        ]

    async def unfinished(self, cart_id: int | None = None) -> list[str]:
        sql = """
            SELECT s.workflow_id
            FROM %(table)s s
            WHERE s.kind = 'started'
              AND (%%(cart_id)s::bigint IS NULL OR (s.data->>'cart_id')::bigint = %%(cart_id)s::bigint)
              AND NOT EXISTS (
                  SELECT 1 FROM %(table)s d
                  WHERE d.workflow_id = s.workflow_id
                    AND (d.kind = 'finalized'
                         OR (d.kind = 'result' AND NOT (d.data->>'success')::boolean))
              )
            ORDER BY s.id
        """ % {'table': self._table}
        async with self._pool.connection() as conn:
            async with conn.cursor() as acursor:
                await acursor.execute(sql, {'cart_id': cart_id})
                rows = await acursor.fetchall()
        return [row[0] for row in rows]

    async def setup(self):
        sql = """
            CREATE TABLE IF NOT EXISTS %(table)s (
                id bigserial PRIMARY KEY,
                workflow_id varchar(255) NOT NULL,
                kind varchar(32) NOT NULL,
                step_name varchar(64) NULL,
                attempt integer NULL,
                data jsonb NOT NULL DEFAULT '{}'::jsonb
            );
            CREATE INDEX IF NOT EXISTS %(table)s_workflow_id_idx ON %(table)s (workflow_id);
        """ % {'table': self._table}
        async with self._pool.connection() as conn:
            await conn.execute(sql)

    async def cleanup(self):
        async with self._pool.connection() as conn:
            await conn.execute("DROP TABLE IF EXISTS %s" % self._table)

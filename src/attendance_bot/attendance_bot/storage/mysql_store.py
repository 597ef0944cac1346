from __future__ import annotations

import json
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .store import DurableStore, Table


class MySQLStore(DurableStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, table: Table, record: dict) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO ledger_log(table_name, payload) VALUES(%s, %s)",
                (Table(table).value, json.dumps(record, ensure_ascii=False)),
            )

    def read(self, table: Table) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM ledger_log
                WHERE table_name=%s
                ORDER BY entry_id
                """,
                (Table(table).value,),
            )
            rows = fetchall(cur)
            return [json.loads(r["payload"]) if isinstance(r["payload"], (str, bytes)) else r["payload"] for r in rows]

"""Диспетчер псевдо-SQL запросов поверх документного хранилища.

Принимает строку запроса и позиционные параметры, как клиент реляционной
БД, и возвращает результат в той же форме:

- INSERT  -> [{"insertId": id}]
- SELECT  -> [[row, ...]]   (вызывающий код читает result[0])
- JOIN    -> [[row, ...]]

Распознаётся только фиксированный набор шаблонов. Всё остальное
логируется как предупреждение и возвращает пустой результат [[]].
Новый код должен звать репозитории напрямую.
"""
import re
from dataclasses import asdict
from typing import Any, Sequence

import structlog

from ..domain.lookup import Found
from .metrics import unmatched_queries_total
from .repositories import Repositories

logger = structlog.get_logger()

_WS = re.compile(r"\s+")


def normalize_sql(sql: str) -> str:
    return _WS.sub(" ", sql.strip().upper())


def _row(entity) -> dict[str, Any]:
    row = asdict(entity)
    row.pop("created_at", None)
    return row


class QueryDispatcher:
    def __init__(self, repos: Repositories):
        self.repos = repos

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list:
        q = normalize_sql(sql)
        params = list(params)
        logger.debug("db_query", sql=q, params=params)

        try:
            # INSERT проверяем раньше SELECT
            if "INSERT INTO EVENTS" in q:
                event = await self.repos.events.create(
                    title=params[0], date=params[1], venue=params[2]
                )
                return [{"insertId": event.id}]

            # SELECT * / SELECT id FROM events WHERE id = ?
            if "SELECT" in q and "FROM EVENTS" in q and "WHERE ID = ?" in q:
                found = await self.repos.events.get(params[0])
                return [[_row(found.value)] if isinstance(found, Found) else []]

            # SELECT * FROM events [ORDER BY ...], без WHERE
            if "SELECT" in q and "FROM EVENTS" in q and "WHERE" not in q:
                events = await self.repos.events.list()
                return [[_row(e) for e in events]]

            if "SELECT ID FROM REGISTRATIONS WHERE EMAIL = ? AND EVENT_ID = ?" in q:
                exists = await self.repos.registrations.exists(params[0], params[1])
                return [[{"id": 1}]] if exists else [[]]

            if "INSERT INTO REGISTRATIONS" in q:
                registration = await self.repos.registrations.create(
                    name=params[0], email=params[1], event_id=params[2]
                )
                return [{"insertId": registration.id}]

            # админский JOIN registrations r + events e
            if "FROM REGISTRATIONS R" in q and "INNER JOIN EVENTS E" in q:
                rows = await self.repos.registrations.list_joined()
                return [[r.as_row() for r in rows]]
        except Exception:
            logger.exception("db_query_failed", sql=q)
            raise

        unmatched_queries_total.inc()
        logger.warning(
            "db_query_unmatched",
            sql=sql,
            normalized=q,
            insert_into_events="INSERT INTO EVENTS" in q,
            select_from_events="SELECT * FROM EVENTS" in q,
            has_where="WHERE" in q,
        )
        return [[]]

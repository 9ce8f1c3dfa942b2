"""In-memory хранилище для разработки и тестов.

Данные живут в процессе и теряются при перезапуске.
"""
from datetime import datetime, timezone
from itertools import count
from typing import Any, Iterable

import structlog

from .store import Document, DocumentNotFound, DocumentStore, COLLECTIONS, check_collection

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _sort_key(value: Any):
    # None в конец, чтобы документы без поля не ломали сортировку
    return (value is None, value if value is not None else "")


class InMemoryDocumentStore(DocumentStore):
    def __init__(self):
        self._data: dict[str, dict[str, Document]] = {c: {} for c in COLLECTIONS}
        self._sequences = {c: count(1) for c in COLLECTIONS}

    async def create(self, collection: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)
        doc_id = str(next(self._sequences[collection]))
        doc = {**fields, "id": doc_id, "created_at": _now()}
        self._data[collection][doc_id] = doc
        logger.debug("document_created", collection=collection, id=doc_id)
        return dict(doc)

    async def put(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)
        doc = {**fields, "id": str(doc_id)}
        doc.setdefault("created_at", _now())
        self._data[collection][str(doc_id)] = doc
        return dict(doc)

    async def get_by_id(self, collection: str, doc_id: str) -> Document:
        check_collection(collection)
        doc = self._data[collection].get(str(doc_id))
        if doc is None:
            raise DocumentNotFound(collection, str(doc_id))
        return dict(doc)

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)
        doc = self._data[collection].get(str(doc_id))
        if doc is None:
            raise DocumentNotFound(collection, str(doc_id))
        doc.update(fields)
        doc["updated_at"] = _now()
        return dict(doc)

    async def list_all(self, collection: str, order_field: str | None = None) -> list[Document]:
        check_collection(collection)
        docs = [dict(d) for d in self._data[collection].values()]
        if order_field:
            docs.sort(key=lambda d: _sort_key(d.get(order_field)))
        return docs

    async def query_by_field(self, collection: str, field: str, value: Any) -> list[Document]:
        return await self.query_by_fields(collection, [(field, value)])

    async def query_by_fields(
        self, collection: str, conditions: Iterable[tuple[str, Any]]
    ) -> list[Document]:
        check_collection(collection)
        conditions = list(conditions)
        return [
            dict(d) for d in self._data[collection].values()
            if all(d.get(f) == v for f, v in conditions)
        ]

    async def delete(self, collection: str, doc_id: str) -> None:
        check_collection(collection)
        self._data[collection].pop(str(doc_id), None)

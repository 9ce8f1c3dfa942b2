"""Документное хранилище поверх SQLAlchemy.

Документы всех коллекций лежат в одной таблице `documents`, поля
документа — в JSON-колонке. Сессии синхронные, поэтому каждая операция
выполняется в threadpool.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

import structlog
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select, delete, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from .db import Base, create_db_engine, create_session_factory
from .models import DocumentORM
from .store import Document, DocumentNotFound, DocumentStore, StoreUnavailable, check_collection

logger = structlog.get_logger()


def to_document(row: DocumentORM) -> Document:
    return {**row.data, "id": row.doc_id, "created_at": row.created_at, "updated_at": row.updated_at}


def _json_field(field: str, value: Any):
    expr = DocumentORM.data[field]
    if isinstance(value, bool):
        return expr.as_boolean() == value
    if isinstance(value, int):
        return expr.as_integer() == value
    return expr.as_string() == str(value)


class SqlDocumentStore(DocumentStore):
    def __init__(self, database_url: str):
        self.engine = create_db_engine(database_url)
        self._session_factory = create_session_factory(self.engine)

    def init_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except OperationalError as e:
            raise StoreUnavailable(f"Database is not reachable: {e.orig}") from e
        logger.info("Database connection established", url=self.engine.url.render_as_string(hide_password=True))

    async def _run(self, fn, *args):
        def _in_session():
            with self._session_factory() as db:
                try:
                    return fn(db, *args)
                except OperationalError as e:
                    db.rollback()
                    raise StoreUnavailable(f"Database operation failed: {e.orig}") from e
                except SQLAlchemyError:
                    db.rollback()
                    raise
        return await run_in_threadpool(_in_session)

    @staticmethod
    def _get_row(db: Session, collection: str, doc_id: str) -> DocumentORM:
        row = db.execute(
            select(DocumentORM).where(
                DocumentORM.collection == collection, DocumentORM.doc_id == str(doc_id)
            )
        ).scalar_one_or_none()
        if row is None:
            raise DocumentNotFound(collection, str(doc_id))
        return row

    async def create(self, collection: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)

        def _create(db: Session) -> Document:
            # id берём из seq, поэтому сначала вставляем с временным ключом
            row = DocumentORM(collection=collection, doc_id=uuid.uuid4().hex, data=dict(fields))
            db.add(row); db.flush()
            row.doc_id = str(row.seq)
            db.commit(); db.refresh(row)
            return to_document(row)

        return await self._run(_create)

    async def put(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)

        def _put(db: Session) -> Document:
            try:
                row = self._get_row(db, collection, doc_id)
                row.data = dict(fields)
            except DocumentNotFound:
                row = DocumentORM(collection=collection, doc_id=str(doc_id), data=dict(fields))
                db.add(row)
            db.commit(); db.refresh(row)
            return to_document(row)

        return await self._run(_put)

    async def get_by_id(self, collection: str, doc_id: str) -> Document:
        check_collection(collection)
        return await self._run(lambda db: to_document(self._get_row(db, collection, doc_id)))

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        check_collection(collection)

        def _update(db: Session) -> Document:
            row = self._get_row(db, collection, doc_id)
            # новый dict, чтобы SQLAlchemy увидел изменение JSON-колонки
            row.data = {**row.data, **fields}
            row.updated_at = datetime.now(timezone.utc)
            db.commit(); db.refresh(row)
            return to_document(row)

        return await self._run(_update)

    async def list_all(self, collection: str, order_field: str | None = None) -> list[Document]:
        check_collection(collection)
        q = select(DocumentORM).where(DocumentORM.collection == collection)
        if order_field:
            q = q.order_by(DocumentORM.data[order_field].as_string(), DocumentORM.seq)
        else:
            q = q.order_by(DocumentORM.seq)
        return await self._run(lambda db: [to_document(r) for r in db.execute(q).scalars()])

    async def query_by_field(self, collection: str, field: str, value: Any) -> list[Document]:
        return await self.query_by_fields(collection, [(field, value)])

    async def query_by_fields(
        self, collection: str, conditions: Iterable[tuple[str, Any]]
    ) -> list[Document]:
        check_collection(collection)
        q = select(DocumentORM).where(DocumentORM.collection == collection)
        for field, value in conditions:
            q = q.where(_json_field(field, value))
        q = q.order_by(DocumentORM.seq)
        return await self._run(lambda db: [to_document(r) for r in db.execute(q).scalars()])

    async def delete(self, collection: str, doc_id: str) -> None:
        check_collection(collection)

        def _delete(db: Session) -> None:
            db.execute(
                delete(DocumentORM).where(
                    DocumentORM.collection == collection, DocumentORM.doc_id == str(doc_id)
                )
            )
            db.commit()

        await self._run(_delete)

    async def close(self) -> None:
        await run_in_threadpool(self.engine.dispose)

# events_service/infrastructure/models.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, String, Integer, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class DocumentORM(Base):
    """Одна строка — один документ любой коллекции."""
    __tablename__ = "documents"

    # сквозная последовательность, из неё генерируются id документов
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    doc_id: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("collection", "doc_id", name="uq_collection_doc"),)

    def __repr__(self) -> str:
        return f"DocumentORM(collection={self.collection!r}, doc_id={self.doc_id!r})"


__all__ = ["Base", "DocumentORM"]

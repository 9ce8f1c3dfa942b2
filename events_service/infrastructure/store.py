"""Контракт документного хранилища.

Хранилище адресует документы по (коллекция, id) и умеет искать только
по равенству полей; джойнов нет. Все операции асинхронные.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable

EVENTS = "events"
REGISTRATIONS = "registrations"
USERS = "users"

COLLECTIONS = (EVENTS, REGISTRATIONS, USERS)

# Документ — плоский dict с ключом "id"
Document = dict[str, Any]


class DocumentStoreError(Exception):
    """Базовая ошибка хранилища."""


class DocumentNotFound(DocumentStoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class StoreUnavailable(DocumentStoreError):
    """Бэкенд недоступен или неправильно сконфигурирован."""


class UnknownCollection(ValueError):
    """Ошибка в коде вызова: такой коллекции нет."""


class DocumentStore(ABC):
    @abstractmethod
    async def create(self, collection: str, fields: dict[str, Any]) -> Document:
        """Создать документ со сгенерированным id."""

    @abstractmethod
    async def put(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        """Записать документ с заданным id (перезаписывает целиком)."""

    @abstractmethod
    async def get_by_id(self, collection: str, doc_id: str) -> Document:
        """Вернуть документ или бросить DocumentNotFound."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> Document:
        """Слить поля в существующий документ; DocumentNotFound если его нет."""

    @abstractmethod
    async def list_all(self, collection: str, order_field: str | None = None) -> list[Document]:
        ...

    @abstractmethod
    async def query_by_field(self, collection: str, field: str, value: Any) -> list[Document]:
        ...

    @abstractmethod
    async def query_by_fields(
        self, collection: str, conditions: Iterable[tuple[str, Any]]
    ) -> list[Document]:
        """Все условия объединяются через AND."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Удаление отсутствующего документа — не ошибка."""

    async def close(self) -> None:
        return None


def check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise UnknownCollection(f"Unknown collection '{collection}'")

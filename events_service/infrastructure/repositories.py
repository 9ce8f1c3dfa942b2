"""Типизированный доступ к коллекциям events / registrations / users.

Хранилище передаётся в конструктор; кэша нет, каждое чтение идёт в store.
"""
from __future__ import annotations

from typing import Any

import structlog

from ..application.dto import RegistrationRow
from ..domain.entities import Event, Registration, User, ROLES
from ..domain.lookup import Found, Lookup, NOT_FOUND
from .metrics import db_queries_total
from .store import DocumentStore, DocumentNotFound, Document, EVENTS, REGISTRATIONS, USERS

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def event_to_domain(d: Document) -> Event:
    return Event(id=d["id"], title=d["title"], date=d["date"], venue=d["venue"],
                 created_at=d.get("created_at"))

def registration_to_domain(d: Document) -> Registration:
    return Registration(id=d["id"], name=d["name"], email=d["email"],
                        event_id=d["event_id"], created_at=d.get("created_at"))

def user_to_domain(d: Document) -> User:
    return User(uid=d["id"], email=d["email"], name=d.get("name") or d["email"],
                role=d.get("role", "student"), created_at=d.get("created_at"),
                updated_at=d.get("updated_at"))


def registration_sort_key(row: RegistrationRow) -> tuple:
    # числовое сравнение id: "10" идёт перед "9"; нечисловые id — в конце
    try:
        return (1, int(row.id), "")
    except (TypeError, ValueError):
        return (0, 0, str(row.id))


class _Repository:
    collection: str

    def __init__(self, store: DocumentStore):
        self.store = store

    def _count(self, operation: str) -> None:
        db_queries_total.labels(collection=self.collection, operation=operation).inc()

    async def _get(self, doc_id: Any) -> Document | None:
        self._count("get")
        try:
            return await self.store.get_by_id(self.collection, str(doc_id))
        except DocumentNotFound:
            return None


class EventRepository(_Repository):
    collection = EVENTS

    async def create(self, title: str, date: str, venue: str) -> Event:
        self._count("create")
        doc = await self.store.create(EVENTS, {"title": title, "date": date, "venue": venue})
        logger.info("event_created", event_id=doc["id"], title=title, date=date)
        return event_to_domain(doc)

    async def get(self, event_id: Any) -> Lookup[Event]:
        doc = await self._get(event_id)
        return Found(event_to_domain(doc)) if doc else NOT_FOUND

    async def list(self) -> list[Event]:
        self._count("list")
        docs = await self.store.list_all(EVENTS, order_field="date")
        return [event_to_domain(d) for d in docs]

    async def delete(self, event_id: Any) -> None:
        # регистрации события не трогаем
        self._count("delete")
        await self.store.delete(EVENTS, str(event_id))
        logger.info("event_deleted", event_id=str(event_id))


class RegistrationRepository(_Repository):
    collection = REGISTRATIONS

    def __init__(self, store: DocumentStore, events: EventRepository | None = None):
        super().__init__(store)
        self.events = events or EventRepository(store)

    async def create(self, name: str, email: str, event_id: Any) -> Registration:
        self._count("create")
        doc = await self.store.create(REGISTRATIONS, {
            "name": name.strip(),
            "email": normalize_email(email),
            "event_id": str(event_id),
        })
        logger.info("registration_created", registration_id=doc["id"], event_id=str(event_id))
        return registration_to_domain(doc)

    async def get(self, registration_id: Any) -> Lookup[Registration]:
        doc = await self._get(registration_id)
        return Found(registration_to_domain(doc)) if doc else NOT_FOUND

    async def list(self) -> list[Registration]:
        self._count("list")
        return [registration_to_domain(d) for d in await self.store.list_all(REGISTRATIONS)]

    async def list_by_event(self, event_id: Any) -> list[Registration]:
        self._count("query")
        docs = await self.store.query_by_field(REGISTRATIONS, "event_id", str(event_id))
        return [registration_to_domain(d) for d in docs]

    async def exists(self, email: str, event_id: Any) -> bool:
        self._count("query")
        docs = await self.store.query_by_fields(
            REGISTRATIONS, [("email", normalize_email(email)), ("event_id", str(event_id))]
        )
        return len(docs) > 0

    async def list_joined(self) -> list[RegistrationRow]:
        registrations = await self.list()
        events_by_id = {e.id: e for e in await self.events.list()}

        rows = []
        for reg in registrations:
            event = events_by_id.get(reg.event_id)
            if event is None:
                continue
            rows.append(RegistrationRow(
                id=reg.id, name=reg.name, email=reg.email,
                event_title=event.title, event_date=event.date, event_venue=event.venue,
            ))
        rows.sort(key=registration_sort_key, reverse=True)
        return rows


class UserRepository(_Repository):
    collection = USERS

    async def get(self, uid: str) -> Lookup[User]:
        doc = await self._get(uid)
        return Found(user_to_domain(doc)) if doc else NOT_FOUND

    async def create(self, uid: str, email: str, name: str | None = None,
                     role: str = "student") -> User:
        """Идемпотентно: если пользователь уже есть, возвращаем его как есть."""
        existing = await self.get(uid)
        if isinstance(existing, Found):
            return existing.value
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")

        self._count("create")
        doc = await self.store.put(USERS, uid, {
            "uid": uid,
            "email": email,
            "name": name or email,
            "role": role,
        })
        logger.info("user_created", uid=uid, role=role)
        return user_to_domain(doc)

    async def update_role(self, uid: str, role: str) -> Lookup[User]:
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        self._count("update")
        try:
            doc = await self.store.update(USERS, uid, {"role": role})
        except DocumentNotFound:
            return NOT_FOUND
        logger.info("user_role_updated", uid=uid, role=role)
        return Found(user_to_domain(doc))

    async def role_of(self, uid: str) -> str:
        user = await self.get(uid)
        return user.value.role if isinstance(user, Found) else "student"


class Repositories:
    """Все репозитории над одним хранилищем."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.events = EventRepository(store)
        self.registrations = RegistrationRepository(store, self.events)
        self.users = UserRepository(store)

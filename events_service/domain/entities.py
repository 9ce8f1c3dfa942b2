from dataclasses import dataclass
from datetime import datetime

ROLES = ("student", "admin")


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    date: str
    venue: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Registration:
    id: str
    name: str
    email: str
    event_id: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class User:
    uid: str
    email: str
    name: str
    role: str = "student"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

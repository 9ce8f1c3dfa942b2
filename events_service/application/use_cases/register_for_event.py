import re

import structlog

from ...domain.entities import Event, Registration
from ...domain.lookup import Found
from ..dto import RegisterInput
from ..errors import AlreadyRegistered, EventNotFound, ValidationFailed

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class IEventReader:
    async def get(self, event_id: str): ...

class IRegistrationRepository:
    async def exists(self, email: str, event_id: str) -> bool: ...
    async def create(self, name: str, email: str, event_id: str) -> Registration: ...


class RegisterForEvent:
    """Регистрация студента на событие.

    Проверка дубликата и вставка — два отдельных обращения к хранилищу
    без транзакции: два одновременных одинаковых запроса могут пройти оба.
    """

    def __init__(self, events: IEventReader, registrations: IRegistrationRepository):
        self.events = events
        self.registrations = registrations

    async def execute(self, data: RegisterInput) -> Registration:
        name = (data.name or "").strip()
        email = (data.email or "").strip()
        # id непрозрачный, но форма может прислать число
        event_id = "" if data.event_id is None else str(data.event_id).strip()

        if not name or not email or not event_id:
            raise ValidationFailed("All fields are required")
        if not EMAIL_RE.match(email):
            raise ValidationFailed("Invalid email format")

        found = await self.events.get(event_id)
        if not isinstance(found, Found):
            raise EventNotFound("Event not found")
        event: Event = found.value

        if await self.registrations.exists(email, event.id):
            logger.info("registration_duplicate", event_id=event.id)
            raise AlreadyRegistered("You are already registered for this event")

        return await self.registrations.create(name, email, event.id)

from datetime import date as date_type

from ...domain.entities import Event
from ..dto import EventInput
from ..errors import ValidationFailed


class IEventWriter:
    async def create(self, title: str, date: str, venue: str) -> Event: ...


class CreateEvent:
    def __init__(self, events: IEventWriter):
        self.events = events

    async def execute(self, data: EventInput) -> Event:
        title = (data.title or "").strip()
        venue = (data.venue or "").strip()
        date = (data.date or "").strip()
        if not title or not date or not venue:
            raise ValidationFailed("All fields are required")
        try:
            date_type.fromisoformat(date)
        except ValueError:
            raise ValidationFailed("Date must be in YYYY-MM-DD format")
        return await self.events.create(title, date, venue)

from dataclasses import dataclass, asdict

@dataclass
class RegisterInput:
    name: str
    email: str
    event_id: int | str

@dataclass
class EventInput:
    title: str
    date: str
    venue: str

@dataclass
class RegistrationRow:
    """Регистрация, склеенная со своим событием (для админки)."""
    id: str
    name: str
    email: str
    event_title: str
    event_date: str
    event_venue: str

    def as_row(self) -> dict:
        return asdict(self)

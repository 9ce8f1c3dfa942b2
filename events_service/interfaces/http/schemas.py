from pydantic import BaseModel

class EventCreate(BaseModel):
    title: str
    date: str
    venue: str

class EventOut(BaseModel):
    id: str
    title: str
    date: str
    venue: str
    class Config: from_attributes = True

class RegistrationCreate(BaseModel):
    name: str
    email: str
    event_id: int | str

class RegistrationOut(BaseModel):
    id: str
    name: str
    email: str
    event_id: str
    class Config: from_attributes = True

class EventDetailOut(BaseModel):
    event: EventOut
    registrations: list[RegistrationOut]

class RegistrationRowOut(BaseModel):
    id: str
    name: str
    email: str
    event_title: str
    event_date: str
    event_venue: str
    class Config: from_attributes = True

class LoginReq(BaseModel):
    id_token: str
    role: str | None = None

class UserResp(BaseModel):
    uid: str
    email: str
    name: str
    role: str
    class Config: from_attributes = True

class RoleUpdate(BaseModel):
    role: str

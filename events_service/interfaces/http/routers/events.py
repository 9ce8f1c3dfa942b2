from fastapi import APIRouter, Depends, HTTPException, status
from ....application.dto import EventInput
from ....application.errors import ValidationFailed
from ....application.use_cases.create_event import CreateEvent
from ....domain.lookup import Found
from ....infrastructure.repositories import Repositories
from ..authz import get_repos, require_admin
from ..schemas import EventCreate, EventOut, EventDetailOut, RegistrationOut

router = APIRouter(prefix="/api/events", tags=["events"])

@router.get("", response_model=list[EventOut])
async def list_events(repos: Repositories = Depends(get_repos)):
    return await repos.events.list()

@router.get("/{event_id}", response_model=EventDetailOut)
async def event_details(event_id: str, repos: Repositories = Depends(get_repos)):
    found = await repos.events.get(event_id)
    if not isinstance(found, Found): raise HTTPException(404, "Event not found")
    registrations = await repos.registrations.list_by_event(event_id)
    return EventDetailOut(
        event=EventOut.model_validate(found.value),
        registrations=[RegistrationOut.model_validate(r) for r in registrations],
    )

# --- Admin-only:

@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_event(payload: EventCreate, repos: Repositories = Depends(get_repos)):
    uc = CreateEvent(repos.events)
    try:
        return await uc.execute(EventInput(title=payload.title, date=payload.date, venue=payload.venue))
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_event(event_id: str, repos: Repositories = Depends(get_repos)):
    # регистрации события остаются в хранилище
    await repos.events.delete(event_id)

from fastapi import APIRouter, Depends, HTTPException, status
from ....application.dto import RegisterInput
from ....application.errors import AlreadyRegistered, EventNotFound, ValidationFailed
from ....application.use_cases.register_for_event import RegisterForEvent
from ....infrastructure.repositories import Repositories
from ..authz import get_repos, require_admin, require_student
from ..schemas import RegistrationCreate, RegistrationOut, RegistrationRowOut

router = APIRouter(prefix="/api", tags=["registrations"])

@router.post("/registrations", response_model=RegistrationOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_student)])
async def register(payload: RegistrationCreate, repos: Repositories = Depends(get_repos)):
    uc = RegisterForEvent(events=repos.events, registrations=repos.registrations)
    try:
        return await uc.execute(RegisterInput(name=payload.name, email=payload.email, event_id=payload.event_id))
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyRegistered as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.get("/admin/registrations", response_model=list[RegistrationRowOut], dependencies=[Depends(require_admin)])
async def all_registrations(repos: Repositories = Depends(get_repos)):
    return await repos.registrations.list_joined()

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ....application.errors import InvalidCredential, RoleNotAllowed
from ....application.use_cases.sign_in import SignIn
from ....domain.entities import User, ROLES
from ....domain.lookup import Found
from ....infrastructure.repositories import Repositories
from ..authz import get_current_user, get_repos, get_verifier, require_admin
from ..schemas import LoginReq, RoleUpdate, UserResp

router = APIRouter(prefix="/api", tags=["auth"])

@router.post("/auth/login", response_model=UserResp)
async def login(request: Request, payload: LoginReq, repos: Repositories = Depends(get_repos),
                verifier=Depends(get_verifier)):
    if payload.role is not None and payload.role not in ROLES:
        raise HTTPException(status_code=400, detail="Unknown role")
    uc = SignIn(verifier=verifier, users=repos.users, admin_emails=request.app.state.admin_emails)
    try:
        return await uc.execute(payload.id_token, requested_role=payload.role)
    except InvalidCredential:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    except RoleNotAllowed as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

@router.get("/auth/me", response_model=UserResp)
async def me(user: User = Depends(get_current_user)):
    return user

@router.put("/users/{uid}/role", response_model=UserResp, dependencies=[Depends(require_admin)])
async def update_role(uid: str, payload: RoleUpdate, repos: Repositories = Depends(get_repos)):
    if payload.role not in ROLES:
        raise HTTPException(status_code=400, detail="Unknown role")
    found = await repos.users.update_role(uid, payload.role)
    if not isinstance(found, Found): raise HTTPException(404, "User not found")
    return found.value

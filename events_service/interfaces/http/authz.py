from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ...application.errors import InvalidCredential
from ...application.use_cases.sign_in import Identity
from ...domain.entities import User, ROLES
from ...domain.lookup import Found
from ...infrastructure.repositories import Repositories

bearer = HTTPBearer(auto_error=False)


def get_repos(request: Request) -> Repositories:
    return request.app.state.repos

def get_verifier(request: Request):
    return request.app.state.verifier


def get_credential(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str:
    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return creds.credentials

def get_identity(credential: str = Depends(get_credential), verifier=Depends(get_verifier)) -> Identity:
    try:
        return verifier.verify(credential)
    except InvalidCredential:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

async def get_current_user(identity: Identity = Depends(get_identity),
                           repos: Repositories = Depends(get_repos)) -> User:
    # пользователя без записи в users считаем студентом
    found = await repos.users.get(identity.uid)
    if isinstance(found, Found):
        return found.value
    return User(uid=identity.uid, email=identity.email, name=identity.name or identity.email)

def require_student(user: User = Depends(get_current_user)) -> User:
    if user.role not in ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin required")
    return user

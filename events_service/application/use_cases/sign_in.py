from dataclasses import dataclass

import structlog

from ...domain.entities import User
from ..errors import RoleNotAllowed

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """То, что внешний провайдер подтверждает по credential."""
    uid: str
    email: str
    name: str | None = None


class IIdentityVerifier:
    def verify(self, credential: str) -> Identity: ...

class IUserRepository:
    async def create(self, uid: str, email: str, name: str | None = None, role: str = "student") -> User: ...


class SignIn:
    """Проверить credential и при первом входе завести пользователя."""

    def __init__(self, verifier: IIdentityVerifier, users: IUserRepository,
                 admin_emails: frozenset[str] = frozenset()):
        self.verifier = verifier
        self.users = users
        # кому разрешено стать админом прямо при входе; остальных назначает админ
        self.admin_emails = admin_emails

    async def execute(self, credential: str, requested_role: str | None = None) -> User:
        identity = self.verifier.verify(credential)
        if requested_role == "admin" and identity.email.strip().lower() not in self.admin_emails:
            logger.warning("admin_role_denied", uid=identity.uid)
            raise RoleNotAllowed("Admin role can only be granted by an admin")
        # для существующего пользователя роль из запроса игнорируется
        user = await self.users.create(
            uid=identity.uid,
            email=identity.email,
            name=identity.name,
            role=requested_role or "student",
        )
        logger.info("user_signed_in", uid=user.uid, role=user.role)
        return user

from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings
from ..application.errors import InvalidCredential
from ..application.use_cases.sign_in import Identity


class JwtIdentityVerifier:
    """Проверяет ID-токен провайдера (HS256 JWT) и достаёт из него identity."""

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM

    def verify(self, credential: str) -> Identity:
        try:
            payload = jwt.decode(credential, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidCredential("Invalid token")
        uid = payload.get("uid") or payload.get("sub")
        email = payload.get("email")
        if not uid or not email:
            raise InvalidCredential("Token has no subject or email")
        return Identity(uid=uid, email=email, name=payload.get("name"))


def create_identity_token(uid: str, email: str, name: str | None = None, minutes: int = 60) -> str:
    """Выпустить токен в формате провайдера (для локальной разработки и тестов)."""
    exp = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {"sub": uid, "email": email, "exp": exp}
    if name:
        payload["name"] = name
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

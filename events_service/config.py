from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    STORE_BACKEND: str = "memory"  # memory | sql
    DATABASE_URL: str = "sqlite:///./events.db"
    SECRET_KEY: str = "dev-secret-events"
    JWT_ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"
    SEED_DEMO_EVENTS: bool = False
    # через запятую: эти адреса могут запросить роль admin при первом входе
    ADMIN_EMAILS: str = ""

    @property
    def admin_emails(self) -> frozenset[str]:
        return frozenset(e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip())

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

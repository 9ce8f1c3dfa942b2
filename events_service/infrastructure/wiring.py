import structlog

from ..config import Settings
from .memory_store import InMemoryDocumentStore
from .sql_store import SqlDocumentStore
from .store import DocumentStore, StoreUnavailable

logger = structlog.get_logger()


def build_store(settings: Settings) -> DocumentStore:
    """Собрать хранилище по настройкам. Вызывается один раз при старте."""
    backend = settings.STORE_BACKEND.strip().lower()
    if backend == "memory":
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    if backend == "sql":
        store = SqlDocumentStore(settings.DATABASE_URL)
        store.init_schema()
        return store
    raise StoreUnavailable(
        f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}'. Use 'memory' or 'sql'."
    )

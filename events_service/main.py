import time
import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .application.seed import seed_demo_events
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.repositories import Repositories
from .infrastructure.security import JwtIdentityVerifier
from .infrastructure.store import DocumentStore, StoreUnavailable
from .infrastructure.wiring import build_store
from .interfaces.http.routers import auth as auth_router
from .interfaces.http.routers import events as events_router
from .interfaces.http.routers import registrations as registrations_router
from .config import settings

# Настройка структурированного логирования
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def create_app(store: DocumentStore | None = None, verifier=None,
               admin_emails: frozenset[str] | None = None) -> FastAPI:
    """Собрать приложение. Хранилище можно передать явно (тесты),
    иначе оно строится из настроек при старте."""
    app = FastAPI(title="Events Service", version="0.1.0")
    app.state.verifier = verifier or JwtIdentityVerifier()
    app.state.admin_emails = settings.admin_emails if admin_emails is None else admin_emails
    app.state.store = store
    app.state.repos = Repositories(store) if store is not None else None

    # Добавляем middleware для правильной кодировки и метрик
    @app.middleware("http")
    async def add_charset_header(request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        response = await call_next(request)

        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"

        # Метрики
        duration = time.time() - start_time
        status_code = response.status_code
        http_requests_total.labels(method=method, endpoint=path, status=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=path).observe(duration)

        # Логирование
        logger.info(
            "http_request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration * 1000, 2)
        )

        return response

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("store_unavailable", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=503,
            content={"detail": "Storage request failed, please try again"},
        )

    @app.on_event("startup")
    async def on_startup():
        logger.info("Starting events service", version="0.1.0", backend=settings.STORE_BACKEND)
        if app.state.store is None:
            app.state.store = build_store(settings)
            app.state.repos = Repositories(app.state.store)
        if settings.SEED_DEMO_EVENTS:
            await seed_demo_events(app.state.repos)

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.store is not None:
            await app.state.store.close()
        logger.info("Events service stopped")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    app.include_router(events_router.router)
    app.include_router(registrations_router.router)
    app.include_router(auth_router.router)
    return app


app = create_app()

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from time import perf_counter

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wallet_score.core.config import settings
from wallet_score.core.logging import (
    configure_logging,
    correlation_context,
    get_logger,
    sanitize_correlation_id,
)
from wallet_score.core.metrics import inc_counter, metrics_registry
from wallet_score.db.database import Base, check_connection, engine
from wallet_score.models import User  # noqa: F401 - registers the users table on Base.metadata
from wallet_score.routers.exceptions import register_exception_handlers
from wallet_score.routers.score import router as score_router
from wallet_score.schemas.score import HealthOut

configure_logging(level=settings.log_level, environment=settings.environment)
logger = get_logger("wallet_score.main", component="app")

REQUEST_ID_HEADER = "X-Request-ID"

_app_start_time = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema in development; production relies on Alembic."""
    if settings.run_startup_ddl:
        logger.info("startup_execute_ddl", extra={"structured_data": {"run_startup_ddl": True}})
        Base.metadata.create_all(bind=engine)
    # an unreachable store is logged, not fatal
    check_connection(engine)
    logger.info(
        "startup_complete",
        extra={
            "structured_data": {
                "environment": settings.environment,
                "database_backend": engine.url.get_backend_name(),
                "allowed_origins": settings.allowed_origins,
            }
        },
    )
    yield
    engine.dispose()
    logger.info("shutdown_complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Bind a correlation id for the request and log its outcome."""
    with correlation_context(sanitize_correlation_id(request.headers.get(REQUEST_ID_HEADER))) as correlation_id:
        started = perf_counter()
        inc_counter("http.requests.total")
        response = await call_next(request)
        elapsed_ms = (perf_counter() - started) * 1000.0
        metrics_registry.record("http.request.duration", elapsed_ms)
        inc_counter(f"http.responses.{response.status_code}")
        response.headers[REQUEST_ID_HEADER] = correlation_id
        logger.info(
            "request_completed",
            extra={
                "structured_data": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(elapsed_ms, 2),
                }
            },
        )
        return response


app.include_router(score_router)


@app.get("/health", response_model=HealthOut)
def health() -> HealthOut:
    """Liveness probe. Never touches the database."""
    now = datetime.now(timezone.utc)
    return HealthOut(
        timestamp=now,
        started_at=_app_start_time,
        uptime_seconds=round((now - _app_start_time).total_seconds(), 2),
    )

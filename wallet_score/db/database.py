from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Iterator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from wallet_score.core.config import Settings, settings
from wallet_score.core.logging import get_logger
from wallet_score.core.metrics import inc_counter, metrics_registry

logger = get_logger("wallet_score.db", component="db")


class Base(DeclarativeBase):
    pass


SESSION_DURATION_BUCKETS: tuple[float, ...] = (2.0, 5.0, 10.0, 25.0, 50.0, 100.0, 250.0)


@dataclass(frozen=True, slots=True)
class DatabaseGateway:
    """Owns the engine (and its connection pool) plus the session factory.

    Built once per process; request handlers only borrow sessions from it.
    """

    engine: Engine
    session_factory: sessionmaker[Session]

    @contextmanager
    def session(self) -> Iterator[Session]:
        started = perf_counter()
        inc_counter("db.session.opens")
        session: Session = self.session_factory()
        try:
            yield session
        finally:
            elapsed_ms = (perf_counter() - started) * 1000.0
            metrics_registry.record("db.session.duration", elapsed_ms)
            metrics_registry.observe_histogram("db.session.duration", elapsed_ms, buckets=SESSION_DURATION_BUCKETS)
            inc_counter("db.session.closes")
            session.close()


def driver_connect_args(config: Settings) -> dict[str, object]:
    """DBAPI ``connect_args`` for the configured backend.

    Shared by the app engine and the Alembic environment so both negotiate
    TLS the same way.
    """
    url: URL = make_url(config.database_url)
    if url.get_backend_name() == "sqlite":
        connect_args: dict[str, object] = {"check_same_thread": False}
        if (url.database or "").startswith("file:"):
            connect_args["uri"] = True
        return connect_args
    if config.database_sslmode:
        return {"sslmode": config.database_sslmode}
    return {}


def build_engine_kwargs(config: Settings) -> dict[str, object]:
    """Translate settings into ``create_engine`` keyword arguments."""

    url: URL = make_url(config.database_url)
    kwargs: dict[str, object] = {"echo": False, "future": True}
    pool_kwargs: dict[str, object] = {
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
        "pool_timeout": config.db_pool_timeout,
        "pool_recycle": config.db_pool_recycle,
        "pool_pre_ping": config.db_pool_pre_ping,
    }
    connect_args = driver_connect_args(config)
    if connect_args:
        kwargs["connect_args"] = connect_args

    if url.get_backend_name() == "sqlite" and (url.database or "") in ("", ":memory:", "file::memory:"):
        # one shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    elif url.get_backend_name() == "sqlite":
        kwargs["poolclass"] = QueuePool
        kwargs.update(pool_kwargs)
    else:
        kwargs.update(pool_kwargs)
    return kwargs


def build_engine(config: Settings) -> Engine:
    return create_engine(config.database_url, **build_engine_kwargs(config))


def check_connection(bind: Engine) -> bool:
    """Round-trip ``SELECT 1`` through the pool; log and report failures instead of raising."""
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        inc_counter("db.connect.failures")
        logger.error(
            "database_connection_failed",
            extra={"structured_data": {"backend": bind.url.get_backend_name(), "error": str(exc)}},
        )
        return False
    logger.info("database_connected", extra={"structured_data": {"backend": bind.url.get_backend_name()}})
    return True


engine: Engine = build_engine(settings)
SessionLocal: sessionmaker[Session] = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
database_gateway = DatabaseGateway(engine=engine, session_factory=SessionLocal)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding one pooled session per request."""
    with database_gateway.session() as session:
        yield session


__all__ = [
    "Base",
    "DatabaseGateway",
    "build_engine",
    "build_engine_kwargs",
    "database_gateway",
    "engine",
    "SessionLocal",
    "get_db",
    "check_connection",
    "driver_connect_args",
]

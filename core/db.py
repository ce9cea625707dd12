from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import get_settings
from core.models import Base


@dataclass
class QueryStats:
    total: int = 0
    slow: int = 0
    p50_ms: float = 0.0
    p95_ms: float = 0.0


_query_samples: list[float] = []


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = get_settings().database_url
    is_sqlite = url.startswith("sqlite")
    # SQLite connections are shared across the server's worker threads.
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        elapsed = (time.perf_counter() - context._query_start_time) * 1000
        _query_samples.append(elapsed)
        if len(_query_samples) > 1000:
            _query_samples.pop(0)

    return engine


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, expire_on_commit=False)


def reset_engine() -> None:
    """Dispose the cached engine so the next call picks up fresh settings."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_engine.cache_clear()
    get_session_factory.cache_clear()
    _query_samples.clear()


def ensure_schema() -> None:
    Base.metadata.create_all(bind=get_engine())


@contextmanager
def session_scope() -> Iterator[Session]:
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_query_stats() -> QueryStats:
    if not _query_samples:
        return QueryStats()
    slow_ms = get_settings().slow_query_ms
    ordered = sorted(_query_samples)
    p50 = ordered[int(len(ordered) * 0.5)]
    p95 = ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))]
    return QueryStats(
        total=len(_query_samples),
        slow=sum(1 for s in _query_samples if s > slow_ms),
        p50_ms=round(p50, 2),
        p95_ms=round(p95, 2),
    )

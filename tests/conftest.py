from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def _reset_runtime_caches() -> None:
    from core.config import get_settings
    from core.db import reset_engine

    get_settings.cache_clear()
    reset_engine()


def _purge_api_modules() -> None:
    # The limiter reads settings at import time.
    for name in [
        "api.main",
        "api.routes",
        "api.practice_sessions",
        "api.attendance",
        "api.pages",
        "api.ratelimit",
    ]:
        sys.modules.pop(name, None)


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file with every table created."""
    db_path = tmp_path / "practrac_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
    monkeypatch.delenv("ATTENDANCE_ATOMIC_BATCHES", raising=False)
    _reset_runtime_caches()

    from core.db import ensure_schema

    ensure_schema()
    yield db_path
    _reset_runtime_caches()


@pytest.fixture
def seeded_db(db_env):
    from db.seed import seed_demo_data

    seed_demo_data()
    return db_env


@pytest.fixture
def build_client(db_env, monkeypatch):
    """Factory for a TestClient whose app is rebuilt under the given env overrides."""

    def _build(env_overrides: dict[str, str] | None = None, seed: bool = True) -> TestClient:
        monkeypatch.setenv("SEED_DEMO_DATA", "true" if seed else "false")
        for key, value in (env_overrides or {}).items():
            monkeypatch.setenv(key, value)
        _reset_runtime_caches()
        _purge_api_modules()

        from api.main import create_app

        return TestClient(create_app())

    return _build


@pytest.fixture
def client(build_client):
    with build_client() as c:
        yield c

"""Application configuration with environment-specific profiles.

Supports dev, test, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    database_url: str
    app_env: str = "dev"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    request_id_header_name: str = "X-Request-ID"

    # Rate limiting (write endpoints only)
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    rate_limit_writes: str = "120/minute"
    rate_limit_trust_forwarded: bool = False

    # Data lifecycle
    seed_demo_data: bool = True
    attendance_atomic_batches: bool = True

    slow_query_ms: float = 250.0
    web_root: str = str(_REPO_ROOT / "web")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "rate_limit_enabled": True,
    },
    "test": {
        "log_level": "WARNING",
        "rate_limit_enabled": False,
        "seed_demo_data": False,
    },
    "production": {
        "log_level": "WARNING",
        "rate_limit_writes": "60/minute",
    },
}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def get_database_url() -> str:
    """Resolve database URL from env var, falling back to a local SQLite file."""
    return os.getenv("DATABASE_URL") or f"sqlite:///{_REPO_ROOT / 'practrac.db'}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        cors_origins=_env_list("CORS_ORIGINS", ["*"]),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),
        rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", profile.get("rate_limit_enabled", True)),
        rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
        rate_limit_writes=os.getenv("RATE_LIMIT_WRITES", profile.get("rate_limit_writes", "120/minute")),
        rate_limit_trust_forwarded=_env_bool("RATE_LIMIT_TRUST_FORWARDED", False),
        seed_demo_data=_env_bool("SEED_DEMO_DATA", profile.get("seed_demo_data", True)),
        attendance_atomic_batches=_env_bool("ATTENDANCE_ATOMIC_BATCHES", True),
        slow_query_ms=float(os.getenv("SLOW_QUERY_MS", "250")),
        web_root=os.getenv("WEB_ROOT", str(_REPO_ROOT / "web")),
    )

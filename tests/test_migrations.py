from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from core.models import Base

REPO_ROOT = Path(__file__).resolve().parents[1]


def _upgrade(db_path: Path) -> str:
    url = f"sqlite+pysqlite:///{db_path}"
    cfg = Config(str(REPO_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    command.upgrade(cfg, "head")
    return url


def test_baseline_revision_file_exists():
    assert (REPO_ROOT / "alembic/versions/0001_practrac_schema.py").exists()


def test_upgrade_matches_model_metadata(tmp_path):
    engine = create_engine(_upgrade(tmp_path / "migrated.db"))
    try:
        insp = inspect(engine)
        tables = set(insp.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            migrated = {c["name"] for c in insp.get_columns(name)}
            assert migrated == {c.name for c in table.columns}, name
    finally:
        engine.dispose()


def test_upgrade_creates_single_active_session_index(tmp_path):
    engine = create_engine(_upgrade(tmp_path / "migrated.db"))
    try:
        indexes = {ix["name"]: ix for ix in inspect(engine).get_indexes("practice_sessions")}
        assert indexes["uq_practice_sessions_single_active"]["unique"]
        uniques = {u["name"] for u in inspect(engine).get_unique_constraints("practice_attendance")}
        assert "uq_attendance_session_player" in uniques
    finally:
        engine.dispose()

from __future__ import annotations

import argparse
from pathlib import Path

from core.db import ensure_schema
from db.seed import seed_demo_data

REPO_ROOT = Path(__file__).resolve().parents[1]


def _migrate() -> None:
    from alembic import command
    from alembic.config import Config

    cfg = Config(str(REPO_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    command.upgrade(cfg, "head")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the PracTrac schema and load demo data.")
    parser.add_argument("--migrate", action="store_true", help="apply alembic migrations instead of create_all")
    parser.add_argument("--no-seed", action="store_true", help="skip the demo data set")
    args = parser.parse_args(argv)

    if args.migrate:
        _migrate()
        print("schema=migrated")
    else:
        ensure_schema()
        print("schema=created")

    if args.no_seed:
        print("seed=skipped")
        return 0
    print(f"seed={'inserted' if seed_demo_data() else 'already_present'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

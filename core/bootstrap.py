from __future__ import annotations

import logging

from core.config import get_settings
from core.db import ensure_schema

logger = logging.getLogger(__name__)


def ensure_demo_seeded() -> bool:
    """
    Create any missing tables and, when enabled, load the demo data set into
    an empty database. Returns True when demo rows were inserted.
    """
    ensure_schema()
    if not get_settings().seed_demo_data:
        logger.debug("demo_seed_disabled")
        return False

    from db.seed import seed_demo_data

    return seed_demo_data()

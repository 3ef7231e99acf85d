"""Persistence collaborator: pick the store implementation for the runtime."""

import logging
from typing import Optional

from dailyfive.core.config import Settings, settings as default_settings
from dailyfive.core.database import check_connection, create_all_tables, get_database_url, init_engine
from dailyfive.features.store.base import Store
from dailyfive.features.store.memory import MemoryStore
from dailyfive.features.store.sql import SqlStore

logger = logging.getLogger("dailyfive")

__all__ = ["Store", "MemoryStore", "SqlStore", "build_store"]


def build_store(settings_obj: Optional[Settings] = None) -> Store:
    """
    Get the appropriate store implementation.

    - SqlStore when DATABASE_URL is configured and reachable (tables are
      created idempotently)
    - MemoryStore otherwise; an unreachable database is fatal in strict mode
    """
    cfg = settings_obj or default_settings
    url = cfg.TEST_DATABASE_URL or cfg.DATABASE_URL or get_database_url()

    if url:
        engine = init_engine(url)
        if check_connection(engine):
            create_all_tables(engine)
            return SqlStore(engine)
        if cfg.CONFIG_STRICT:
            raise RuntimeError("Database unavailable and CONFIG_STRICT is enabled")
        logger.warning("[store] database unavailable, falling back to in-memory store")

    return MemoryStore()

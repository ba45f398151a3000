"""Item Store Lifecycle — process-wide store opened on startup, closed on shutdown.

Invariants:
    - Single item store per process (initialized via init_store)
    - Startup fails if the store cannot be reached (check() must pass)
    - Schema is created on startup only when RepoConfig.migrate is set

Design Decisions:
    - Singleton item_store managed by the FastAPI lifespan (no global import side effects)
    - get_store as a dependency: route tests override it with a per-test store
"""

import logging

from payments_api.config import RepoConfig
from payments_api.core.repository_protocols import VersionedItemStore
from payments_api.infrastructure.sql_item_store import new_store

logger = logging.getLogger(__name__)

# Singleton (initialized on startup)
item_store: VersionedItemStore | None = None


async def init_store(config: RepoConfig) -> VersionedItemStore:
    global item_store
    store = new_store(config)
    try:
        if config.migrate:
            await store.migrate()
        await store.check()
    except Exception:
        await store.close()
        raise
    logger.info(f"Item store ready: {store.description()}")
    item_store = store
    return store


async def close_store() -> None:
    global item_store
    if item_store is not None:
        await item_store.close()
        item_store = None


def get_store() -> VersionedItemStore:
    """FastAPI dependency for the item store."""
    if not item_store:
        raise RuntimeError("Item store not initialized")
    return item_store

"""SQL Dialect Hooks — the per-driver surface plugged into the generic SQL item store.

Invariants:
    - A hook set never executes SQL; it only describes how to reach and talk to a backend
    - insert() must support ON CONFLICT (id) DO NOTHING so duplicate ids surface
      as a zero rowcount instead of a driver-specific exception
    - Unknown drivers fail with StoreError before any engine is created
    - single_connection(url) is true when every session shares one DBAPI
      connection (in-memory sqlite); the store must then run one transaction at a time

Design Decisions:
    - Composition over inheritance: SqlItemStore holds a DialectHooks value instead
      of being subclassed per driver
    - Placeholder syntax is delegated to SQLAlchemy's bound parameters, so the
      hooks carry the INSERT construct and engine options only
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import make_url

from payments_api.config import RepoConfig
from payments_api.core.errors import StoreError


@dataclass(frozen=True)
class DialectHooks:
    """Driver-specific hooks for the generic SQL item store."""
    name: str
    url_scheme: str
    default_uri: str | None
    insert: Callable[..., Any]
    engine_options: Callable[[RepoConfig], dict]
    single_connection: Callable[[str], bool] = lambda url: False

    def database_url(self, uri: str) -> str:
        """Turn a driver connection string into a SQLAlchemy async URL."""
        uri = uri.strip()
        if not uri:
            if self.default_uri is None:
                raise StoreError(
                    f"repo driver {self.name} requires a connection uri", "connect",
                )
            return self.default_uri
        if "://" not in uri:
            return f"{self.url_scheme}:///{uri}"
        _, rest = uri.split("://", 1)
        return f"{self.url_scheme}://{rest}"


def _sqlite_engine_options(config: RepoConfig) -> dict:
    # aiosqlite picks StaticPool for :memory: and a queue pool for files
    return {"echo": config.debug}


def _sqlite_is_memory(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


def _postgres_engine_options(config: RepoConfig) -> dict:
    return {
        "echo": config.debug,
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


SQLITE3 = DialectHooks(
    name="sqlite3",
    url_scheme="sqlite+aiosqlite",
    default_uri="sqlite+aiosqlite:///:memory:",
    insert=sqlite.insert,
    engine_options=_sqlite_engine_options,
    single_connection=_sqlite_is_memory,
)

POSTGRES = DialectHooks(
    name="postgres",
    url_scheme="postgresql+asyncpg",
    default_uri=None,
    insert=postgresql.insert,
    engine_options=_postgres_engine_options,
)

_DRIVERS: dict[str, DialectHooks] = {
    "sqlite3": SQLITE3,
    "sqlite": SQLITE3,
    "postgres": POSTGRES,
    "postgresql": POSTGRES,
}


def hooks_for(driver: str) -> DialectHooks:
    """Look up the hook set for a configured driver name."""
    try:
        return _DRIVERS[driver.strip().lower()]
    except KeyError:
        raise StoreError(f"repo driver not supported: {driver}", "connect") from None

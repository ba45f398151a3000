"""SQL Item Store — versioned CRUD with optimistic concurrency and soft delete.

Invariants:
    - Every operation runs in its own transaction and maps to one bounded statement
    - Update and delete are conditional: WHERE id AND version AND NOT deleted,
      so check-and-mutate is atomic at row level (no read-then-write race)
    - 0 rows matched -> ItemConflictError; 1 row -> success; >1 rows -> StoreError
    - Create ignores the caller's version and writes 0; an occupied id (even a
      tombstone) is a conflict detected through ON CONFLICT DO NOTHING
    - Only non-deleted rows are visible to list, fetch and info
    - All SQLAlchemy exceptions are mapped to StoreError (core/errors.py)
    - On a single shared connection (in-memory sqlite) transactions are
      serialized, so one request's rollback never discards another's write

Design Decisions:
    - Statements are pre-built once per instance (StoreStatements) against the
      instance's own table, so several stores can live in one process
    - Driver differences live in DialectHooks (sql_dialects.py) and are composed in
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from dataclasses import dataclass
from typing import Any, AsyncGenerator

from sqlalchemy import (
    Delete, Insert, Select, Table, Update,
    bindparam, delete, false, func, select, text, update,
)
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from payments_api.config import RepoConfig
from payments_api.core.domain_types import StoredItem, StoreInfo
from payments_api.core.errors import (
    ItemConflictError, ItemNotFoundError, StoreError, is_conflict, is_not_found,
)
from payments_api.db.tables import build_items_table
from payments_api.infrastructure.sql_dialects import DialectHooks, hooks_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreStatements:
    """Pre-built statements bound to one items table."""
    table: Table
    count: Select
    delete_all: Delete
    list_page: Select
    fetch: Select
    create: Insert
    update: Update
    tombstone: Update

    @classmethod
    def build(cls, table: Table, hooks: DialectHooks) -> "StoreStatements":
        c = table.c
        visible = c.deleted == false()
        columns = (c.id, c.version, c.organisation, c.attributes)
        matches_version = (
            (c.id == bindparam("item_id"))
            & (c.version == bindparam("expected_version"))
            & visible
        )
        return cls(
            table=table,
            count=select(func.count()).select_from(table).where(visible),
            delete_all=delete(table),
            list_page=select(*columns).where(visible).order_by(c.id),
            fetch=select(*columns).where(c.id == bindparam("item_id"), visible),
            create=hooks.insert(table).values(
                id=bindparam("item_id"),
                version=0,
                organisation=bindparam("item_organisation"),
                attributes=bindparam("item_attributes"),
                deleted=False,
            ).on_conflict_do_nothing(index_elements=[c.id]),
            update=update(table).where(matches_version).values(
                organisation=bindparam("item_organisation"),
                attributes=bindparam("item_attributes"),
                version=c.version + 1,
            ),
            tombstone=update(table).where(matches_version).values(deleted=True),
        )


def _row_to_item(row: Any) -> StoredItem:
    return StoredItem(
        id=row.id,
        version=row.version,
        organisation=row.organisation,
        attributes=row.attributes,
    )


class SqlItemStore:
    """Versioned item store over any SQLAlchemy async engine."""

    def __init__(self, config: RepoConfig, hooks: DialectHooks):
        self.hooks = hooks
        self.config = config
        url = hooks.database_url(config.uri)
        self.engine: AsyncEngine = create_async_engine(
            url, **hooks.engine_options(config),
        )
        self._lock = asyncio.Lock() if hooks.single_connection(url) else None
        self._statements = StoreStatements.build(
            build_items_table(config.table, config.schema), hooks,
        )

    @property
    def statements(self) -> StoreStatements:
        return self._statements

    def description(self) -> str:
        url = self.engine.url.render_as_string(hide_password=True)
        return f"{self.hooks.name} ({url})"

    @asynccontextmanager
    async def _transaction(
        self, operation: str,
    ) -> AsyncGenerator[AsyncConnection, None]:
        """Run one statement in its own transaction, mapping driver errors."""
        try:
            async with self._lock or nullcontext():
                async with self.engine.begin() as conn:
                    yield conn
        except IntegrityError as e:
            logger.warning(f"DB integrity error on {operation}: {e}")
            raise StoreError("Integrity constraint violated", operation) from e
        except OperationalError as e:
            logger.warning(f"DB operational error on {operation}: {e}")
            raise StoreError("Connection or operational error", operation) from e
        except DBAPIError as e:
            logger.warning(f"DB driver error on {operation}: {e}")
            raise StoreError("Database driver error", operation) from e
        except SQLAlchemyError as e:
            logger.warning(f"SQLAlchemy error on {operation}: {e}")
            raise StoreError("Database operation failed", operation) from e
        except OverflowError as e:
            logger.warning(f"Value out of range on {operation}: {e}")
            raise StoreError("Value out of range for the database", operation) from e

    async def migrate(self) -> None:
        """Create the items table if it does not exist yet."""
        async with self._transaction("migrate") as conn:
            await conn.run_sync(self._statements.table.metadata.create_all)
        logger.info(f"Database migrated: {self.description()}")

    async def check(self) -> None:
        async with self._transaction("check") as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        logger.info(f"Closing: {self.description()}")
        await self.engine.dispose()

    async def info(self) -> StoreInfo:
        async with self._transaction("info") as conn:
            count = (await conn.execute(self._statements.count)).scalar_one()
        return StoreInfo(count=count)

    async def list_items(self, offset: int, limit: int) -> list[StoredItem]:
        if offset < 0 or limit < 0:
            raise StoreError(
                f"invalid window offset={offset} limit={limit}", "list",
            )
        stmt = self._statements.list_page.offset(offset).limit(limit)
        async with self._transaction("list") as conn:
            rows = (await conn.execute(stmt)).all()
        return [_row_to_item(row) for row in rows]

    async def fetch(self, item_id: str) -> StoredItem:
        async with self._transaction("fetch") as conn:
            result = await conn.execute(
                self._statements.fetch, {"item_id": item_id},
            )
            row = result.first()
        if row is None:
            raise ItemNotFoundError(item_id, "fetch")
        return _row_to_item(row)

    async def create(self, item: StoredItem) -> StoredItem:
        async with self._transaction("create") as conn:
            result = await conn.execute(self._statements.create, {
                "item_id": item.id,
                "item_organisation": item.organisation,
                "item_attributes": item.attributes,
            })
            if result.rowcount == 0:
                raise ItemConflictError(item.id, "create")
        return item.with_version(0)

    async def update(self, item: StoredItem) -> StoredItem:
        async with self._transaction("update") as conn:
            result = await conn.execute(self._statements.update, {
                "item_id": item.id,
                "expected_version": item.version,
                "item_organisation": item.organisation,
                "item_attributes": item.attributes,
            })
            self._expect_single_row(result.rowcount, item, "update")
        logger.debug(f"version {item.version} => {item.version + 1} for {item.id}")
        return item.with_version(item.version + 1)

    async def delete(self, item: StoredItem) -> None:
        async with self._transaction("delete") as conn:
            result = await conn.execute(self._statements.tombstone, {
                "item_id": item.id,
                "expected_version": item.version,
            })
            self._expect_single_row(result.rowcount, item, "delete")

    async def delete_all(self) -> None:
        """Hard delete every row, tombstones included. Cannot be undone."""
        async with self._transaction("delete_all") as conn:
            await conn.execute(self._statements.delete_all)
        logger.warning(f"All items deleted from {self.description()}")

    @staticmethod
    def _expect_single_row(rowcount: int, item: StoredItem, operation: str) -> None:
        # Raised inside the transaction so a multi-row mutation is rolled back
        if rowcount == 0:
            raise ItemConflictError(item.id, operation, item.version)
        if rowcount != 1:
            raise StoreError(
                f"more than 1 row affected by {operation}: {rowcount}", operation,
            )

    def is_conflict(self, err: BaseException) -> bool:
        return is_conflict(err)

    def is_not_found(self, err: BaseException) -> bool:
        return is_not_found(err)


def new_store(config: RepoConfig) -> SqlItemStore:
    """Build a store for the configured driver. The caller owns close()."""
    return SqlItemStore(config, hooks_for(config.driver))

"""Items Table — schema of the versioned, soft-deleted item store.

Invariants:
    - id is the primary key and covers deleted rows too (tombstones reserve ids)
    - version is non-null and starts at 0
    - attributes holds the serialized payload as text; never queried by content
    - deleted defaults to false and is only ever flipped to true by the store

Design Decisions:
    - SQLAlchemy Core Table over a declarative model: the table and schema names
      are chosen per store instance, so tests can run several stores side by side
"""

from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table, Text, false


DEFAULT_TABLE_NAME = "payments"


def build_items_table(
    name: str = DEFAULT_TABLE_NAME, schema: str | None = None,
) -> Table:
    """Build the items table on a fresh MetaData."""
    metadata = MetaData(schema=schema)
    return Table(
        name,
        metadata,
        Column("id", String(255), primary_key=True),
        Column("version", Integer, nullable=False, default=0, server_default="0"),
        Column("organisation", Text, nullable=False, default=""),
        Column("attributes", Text, nullable=False, default=""),
        Column(
            "deleted", Boolean, nullable=False,
            default=False, server_default=false(),
        ),
    )

"""Database Schema — table definitions shared by the item store and alembic.

Invariants:
    - Tables are built per store instance on their own MetaData (no global registry)
    - The alembic revision mirrors build_items_table column for column
"""

"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (inbound payloads, outbound bodies)
    - Only the amount attribute is interpreted; other attributes pass through untouched

Design Decisions:
    - Separate from the store: schemas are API contracts, StoredItem is persistence
"""

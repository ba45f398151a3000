"""Core Layer — domain types, errors, store contract and pure request logic, no IO.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Mapping, pagination and rate parsing never touch the network or the DB
    - The store contract (repository_protocols) is declared async; its
      implementations live in infrastructure/
"""

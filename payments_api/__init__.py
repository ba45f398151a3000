"""Payments API — versioned payment resource over a relational item store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

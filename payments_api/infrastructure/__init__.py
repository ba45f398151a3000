"""Infrastructure Layer — SQL item store, store lifecycle and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver errors never escape as SQLAlchemy exceptions (mapped to StoreError)
"""

"""Route Modules — health, payments, admin and metrics, one APIRouter each.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes parse requests and delegate; decisions live in services/
"""

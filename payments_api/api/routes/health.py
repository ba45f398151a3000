"""Health Probe — reports whether the item store is reachable.

Invariants:
    - GET /health/ returns 200 {"status": "up"} when the store check passes
    - Returns 503 {"status": "down"} otherwise, so orchestration can take the
      instance out of rotation

Design Decisions:
    - The probe goes through get_store like every other route: the same store
      that serves payments is the one being checked
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from payments_api.core.errors import StoreError
from payments_api.core.repository_protocols import VersionedItemStore
from payments_api.infrastructure.database import get_store
from payments_api.schemas.payment import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", response_model=HealthResponse)
async def health_check(store: VersionedItemStore = Depends(get_store)):
    """Liveness/readiness probe backed by the store check."""
    try:
        await store.check()
    except StoreError as e:
        logger.error(f"Store health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(status="down").model_dump(),
        )
    return HealthResponse(status="up")

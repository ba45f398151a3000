"""Admin Routes — store reset and inspection for test and ops environments.

Invariants:
    - Mounted only when settings.admin_routes is enabled
    - DELETE /admin/repo hard-deletes every row, tombstones included (204)
    - GET /admin/repo reports the count of non-deleted items
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from payments_api.core.errors import DatabaseError, ErrorContext, StoreError
from payments_api.core.repository_protocols import VersionedItemStore
from payments_api.infrastructure.database import get_store
from payments_api.schemas.payment import RepoInfoResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.delete(
    "/repo", status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def delete_repo(store: VersionedItemStore = Depends(get_store)):
    try:
        await store.delete_all()
    except StoreError as e:
        raise DatabaseError(
            e.message, "delete_all", ErrorContext(operation="delete_all", cause=e),
        ) from e
    logger.warning("Repo wiped through admin route")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/repo", response_model=RepoInfoResponse)
async def get_repo(store: VersionedItemStore = Depends(get_store)):
    try:
        info = await store.info()
    except StoreError as e:
        raise DatabaseError(
            e.message, "info", ErrorContext(operation="info", cause=e),
        ) from e
    return RepoInfoResponse(count=info.count)

"""Payments Resource — list/fetch/create/update/delete over HTTP.

Invariants:
    - Routes only parse the request and delegate to PaymentHandlers
    - from/to/version are read as raw strings; parsing rules live in the handlers
    - Successful delete returns 204 with no body

Design Decisions:
    - Handlers built per request from app.state.settings and the get_store dependency
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status

from payments_api.core.repository_protocols import VersionedItemStore
from payments_api.infrastructure.database import get_store
from payments_api.schemas.payment import (
    PaymentRequest, PaymentResponse, PaymentsResponse,
)
from payments_api.services.handle_payments import PaymentHandlers

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_handlers(
    request: Request, store: VersionedItemStore = Depends(get_store),
) -> PaymentHandlers:
    settings = request.app.state.settings
    return PaymentHandlers(store, settings.base_url, settings.max_page_size)


@router.get("", response_model=PaymentsResponse)
async def list_payments(
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
    handlers: PaymentHandlers = Depends(get_payment_handlers),
):
    """A finite page of payments between from (inclusive) and to (exclusive)."""
    return await handlers.list_payments(from_, to)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def fetch_payment(
    payment_id: str, handlers: PaymentHandlers = Depends(get_payment_handlers),
):
    return await handlers.fetch_payment(payment_id)


@router.post(
    "", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED,
)
async def create_payment(
    body: PaymentRequest,
    handlers: PaymentHandlers = Depends(get_payment_handlers),
):
    return await handlers.create_payment(body.data)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: str,
    body: PaymentRequest,
    handlers: PaymentHandlers = Depends(get_payment_handlers),
):
    """Replace attributes of the payment at body.data.version; 409 if stale."""
    return await handlers.update_payment(payment_id, body.data)


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_payment(
    payment_id: str,
    version: str | None = Query(None),
    handlers: PaymentHandlers = Depends(get_payment_handlers),
):
    await handlers.delete_payment(payment_id, version)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

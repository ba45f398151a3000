"""Payment Handlers — store failures map to the right API errors.

Invariants:
    - Store failures other than conflict / not-found become DatabaseError (500)
    - A zero-row mutation after a successful probe is a conflict (409)
    - 5xx failures are logged at ERROR with their cause; 4xx are not
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from payments_api.core.domain_types import StoredItem
from payments_api.core.errors import (
    ConcurrencyError, DatabaseError, ItemNotFoundError, RequestValidationFailed,
    StoreError, is_conflict, is_not_found,
)
from payments_api.infrastructure.database import get_store
from payments_api.schemas.payment import Payment
from payments_api.services.handle_payments import PaymentHandlers, parse_version


def _fake_store(
    error: StoreError | None = None, fetch_error: StoreError | None = None,
) -> MagicMock:
    """Store double: fetch succeeds unless fetch_error, every write raises error."""
    store = MagicMock()
    store.fetch = AsyncMock(
        side_effect=fetch_error,
        return_value=StoredItem(id="p1", organisation="org1", attributes='{"amount":"1"}'),
    )
    for name in ("list_items", "create", "update", "delete", "delete_all"):
        setattr(store, name, AsyncMock(side_effect=error))
    store.is_conflict.side_effect = is_conflict
    store.is_not_found.side_effect = is_not_found
    return store


def _payment(payment_id: str = "p1", version: int = 0) -> Payment:
    return Payment.model_validate({
        "id": payment_id, "type": "Payment", "version": version,
        "organisation_id": "org1", "attributes": {"amount": "1"},
    })


def _handlers(store: MagicMock) -> PaymentHandlers:
    return PaymentHandlers(store, "http://test/v1")


# ─── parse_version ───────────────────────────────────────────────

def test_parse_version():
    assert parse_version(" 3 ") == 3
    assert parse_version(str(2**63 - 1)) == 2**63 - 1
    for raw in (None, "", "v1", "-1", str(2**63), "99999999999999999999"):
        with pytest.raises(RequestValidationFailed):
            parse_version(raw)


# ─── Error mapping ───────────────────────────────────────────────

async def test_store_failure_on_create_is_database_error():
    handlers = _handlers(_fake_store(StoreError("disk full", "create")))
    with pytest.raises(DatabaseError) as exc:
        await handlers.create_payment(_payment())
    assert exc.value.http_status == 500
    assert exc.value.context.operation == "create"
    assert isinstance(exc.value.context.cause, StoreError)


async def test_store_failure_on_list_is_database_error():
    handlers = _handlers(_fake_store(StoreError("gone", "list")))
    with pytest.raises(DatabaseError):
        await handlers.list_payments(None, None)


async def test_store_failure_on_fetch_is_database_error():
    handlers = _handlers(_fake_store(fetch_error=StoreError("gone", "fetch")))
    with pytest.raises(DatabaseError):
        await handlers.fetch_payment("p1")


async def test_item_vanishing_after_probe_is_conflict():
    handlers = _handlers(_fake_store(ItemNotFoundError("p1", "update")))
    with pytest.raises(ConcurrencyError):
        await handlers.update_payment("p1", _payment())
    with pytest.raises(ConcurrencyError):
        await handlers.delete_payment("p1", "0")


async def test_store_failure_on_delete_is_database_error():
    handlers = _handlers(_fake_store(StoreError("locked", "delete")))
    with pytest.raises(DatabaseError) as exc:
        await handlers.delete_payment("p1", "0")
    assert exc.value.context.payment_id == "p1"


# ─── Over HTTP ───────────────────────────────────────────────────

async def test_store_failure_is_500_with_empty_body_and_logged(
    app, client, payment_body, caplog,
):
    app.dependency_overrides[get_store] = lambda: _fake_store(StoreError("disk full", "create"))
    caplog.set_level(logging.INFO)

    res = await client.post("/v1/payments", json=payment_body())

    assert res.status_code == 500
    assert res.json() == {}
    errors = [
        r for r in caplog.records
        if r.name == "payments_api.api.error_handlers" and r.levelno == logging.ERROR
    ]
    assert len(errors) == 1
    assert errors[0].exc_info is not None
    assert "disk full" in errors[0].getMessage()


async def test_client_errors_are_not_logged_at_error(client, caplog):
    caplog.set_level(logging.INFO)

    res = await client.get("/v1/payments/ghost")

    assert res.status_code == 404
    assert not [
        r for r in caplog.records
        if r.name == "payments_api.api.error_handlers" and r.levelno >= logging.ERROR
    ]

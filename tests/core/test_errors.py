"""Error Hierarchy — tests for store error kinds and API error envelopes.

Tests cover:
    - conflict / not-found classification is by type, not message
    - each API error carries its status, code and category
    - to_response() envelope shape, with internal causes kept out of it
"""

from payments_api.core.errors import (
    ConcurrencyError, DatabaseError, ErrorCategory, ErrorContext, ItemConflictError,
    ItemNotFoundError, RequestValidationFailed, ResourceNotFoundError, StoreError,
    is_conflict, is_not_found,
)


# ─── Store errors ────────────────────────────────────────────────

def test_store_error_kinds():
    conflict = ItemConflictError("p1", "update", version=3)
    missing = ItemNotFoundError("p1")
    plain = StoreError("conflict everywhere", "update")

    assert is_conflict(conflict) and not is_not_found(conflict)
    assert is_not_found(missing) and not is_conflict(missing)
    assert not is_conflict(plain) and not is_not_found(plain)


def test_conflict_message_names_version():
    err = ItemConflictError("p1", "update", version=3)
    assert err.message == "conflict on item 'p1' at version 3"
    assert err.operation == "update"


# ─── API errors ──────────────────────────────────────────────────

def test_api_error_statuses():
    assert RequestValidationFailed("bad", "from").http_status == 400
    assert ResourceNotFoundError("Payment", "p1").http_status == 404
    assert ConcurrencyError("stale").http_status == 409
    assert DatabaseError("down", "fetch").http_status == 500


def test_server_error_flag():
    assert DatabaseError("down", "fetch").is_server_error
    assert not ConcurrencyError("stale").is_server_error


def test_to_response_envelope():
    ctx = ErrorContext(
        payment_id="p1", operation="update", cause=RuntimeError("secret dsn"),
    )
    body = ConcurrencyError("stale", ctx).to_response()

    error = body["error"]
    assert error["code"] == "CONCURRENCY_CONFLICT"
    assert error["category"] == ErrorCategory.CONFLICT.value
    assert error["severity"] == "warning"
    assert error["context"] == {"payment_id": "p1", "operation": "update"}
    assert "secret dsn" not in str(body)

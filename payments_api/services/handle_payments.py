"""Payment Handlers — one decision tree per REST operation over the item store.

Invariants:
    - Holds no state between requests; all mutual exclusion is the store's conditional update
    - Store outcomes map to API errors by kind: not found -> 404, conflict -> 409,
      anything else -> 500 (DatabaseError)
    - Update and delete probe for existence first, so an id that never existed
      (or is already deleted) is 404 even when the version is also wrong
    - After a successful probe, a zero-row mutation is always 409: the item moved
      to another version or was deleted in between
    - Conflicts are surfaced to the caller, never retried here

Design Decisions:
    - Store errors are classified through store.is_conflict / store.is_not_found,
      keeping this module free of any engine vocabulary
"""

import logging

from payments_api.core.domain_types import StoredItem
from payments_api.core.errors import (
    ConcurrencyError, DatabaseError, ErrorContext, RequestValidationFailed,
    ResourceNotFoundError, StoreError,
)
from payments_api.core.paginate import build_page_links, payment_link, resolve_page
from payments_api.core.repository_protocols import VersionedItemStore
from payments_api.core.translate_payment import (
    payment_from_item, payment_to_item, payments_from_items,
)
from payments_api.schemas.payment import (
    MAX_VERSION, Payment, PaymentResponse, PaymentsResponse,
)

logger = logging.getLogger(__name__)


def parse_version(raw: str | None) -> int:
    """The delete precondition: an integer version query parameter."""
    if raw is None or not raw.strip():
        raise RequestValidationFailed("'version' query parameter is required", "version")
    try:
        version = int(raw.strip())
    except ValueError:
        raise RequestValidationFailed("'version' must be an integer", "version") from None
    if not 0 <= version <= MAX_VERSION:
        raise RequestValidationFailed(
            f"'version' must be between 0 and {MAX_VERSION}", "version",
        )
    return version


class PaymentHandlers:
    """List, fetch, create, update and delete payments."""

    def __init__(
        self, store: VersionedItemStore, base_url: str, max_page_size: int = 20,
    ):
        self._store = store
        self._base_url = base_url
        self._max_page_size = max_page_size

    async def list_payments(
        self, raw_from: str | None, raw_to: str | None,
    ) -> PaymentsResponse:
        window = resolve_page(raw_from, raw_to, self._max_page_size)
        try:
            items = await self._store.list_items(window.start, window.limit)
        except StoreError as e:
            raise self._database_error(e, "list") from e
        return PaymentsResponse(
            data=payments_from_items(items),
            links=build_page_links(self._base_url, window),
        )

    async def fetch_payment(self, payment_id: str) -> PaymentResponse:
        item = await self._fetch_or_404(payment_id)
        return self._render(payment_from_item(item))

    async def create_payment(self, payment: Payment) -> PaymentResponse:
        try:
            created = await self._store.create(payment_to_item(payment))
        except StoreError as e:
            if self._store.is_conflict(e):
                raise ConcurrencyError(
                    f"Payment '{payment.id}' already exists",
                    ErrorContext(payment_id=payment.id, operation="create"),
                ) from e
            raise self._database_error(e, "create", payment.id) from e
        logger.info(
            f"Payment created: {payment.id}",
            extra={"payment_id": payment.id, "operation": "create"},
        )
        return self._render(payment_from_item(created))

    async def update_payment(
        self, payment_id: str, payment: Payment,
    ) -> PaymentResponse:
        if payment.id != payment_id:
            raise RequestValidationFailed(
                f"Payment id '{payment.id}' does not match path id '{payment_id}'",
                "data.id",
                ErrorContext(payment_id=payment_id, operation="update"),
            )
        await self._fetch_or_404(payment_id)
        try:
            updated = await self._store.update(payment_to_item(payment))
        except StoreError as e:
            if self._store.is_conflict(e) or self._store.is_not_found(e):
                raise ConcurrencyError(
                    f"Payment '{payment_id}' is not at version {payment.version}",
                    ErrorContext(payment_id=payment_id, operation="update"),
                ) from e
            raise self._database_error(e, "update", payment_id) from e
        logger.info(
            f"Payment updated: {payment_id} -> v{updated.version}",
            extra={"payment_id": payment_id, "operation": "update"},
        )
        return self._render(payment_from_item(updated))

    async def delete_payment(self, payment_id: str, raw_version: str | None) -> None:
        version = parse_version(raw_version)
        await self._fetch_or_404(payment_id)
        try:
            await self._store.delete(StoredItem(id=payment_id, version=version))
        except StoreError as e:
            if self._store.is_conflict(e) or self._store.is_not_found(e):
                raise ConcurrencyError(
                    f"Payment '{payment_id}' is not at version {version}",
                    ErrorContext(payment_id=payment_id, operation="delete"),
                ) from e
            raise self._database_error(e, "delete", payment_id) from e
        logger.info(
            f"Payment deleted: {payment_id}",
            extra={"payment_id": payment_id, "operation": "delete"},
        )

    async def _fetch_or_404(self, payment_id: str) -> StoredItem:
        try:
            return await self._store.fetch(payment_id)
        except StoreError as e:
            if self._store.is_not_found(e):
                raise ResourceNotFoundError(
                    "Payment", payment_id,
                    ErrorContext(payment_id=payment_id, operation="fetch"),
                ) from e
            raise self._database_error(e, "fetch", payment_id) from e

    def _render(self, payment: Payment) -> PaymentResponse:
        return PaymentResponse(
            data=payment,
            links={"self": payment_link(self._base_url, payment.id)},
        )

    @staticmethod
    def _database_error(
        err: StoreError, operation: str, payment_id: str | None = None,
    ) -> DatabaseError:
        return DatabaseError(
            err.message, operation,
            ErrorContext(payment_id=payment_id, operation=operation, cause=err),
        )

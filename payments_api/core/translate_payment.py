"""Payment Translator — pure mapping between API payments and stored items.

Invariants:
    - attributes are serialized to JSON on the way in and parsed on the way out
    - A stored payload that no longer parses raises TranslationError (data
      corruption), never a request validation error
    - No IO, no mutation of inputs
"""

from pydantic import ValidationError

from payments_api.core.domain_types import StoredItem
from payments_api.core.errors import TranslationError
from payments_api.schemas.payment import PAYMENT_TYPE, Payment, PaymentAttributes


def payment_to_item(payment: Payment) -> StoredItem:
    """Convert a payment into something the item store can persist."""
    return StoredItem(
        id=payment.id,
        version=payment.version,
        organisation=payment.organisation,
        attributes=payment.attributes.model_dump_json(),
    )


def payment_from_item(item: StoredItem) -> Payment:
    """Convert a stored item back into a payment."""
    try:
        attributes = PaymentAttributes.model_validate_json(item.attributes or "{}")
        return Payment(
            id=item.id,
            type=PAYMENT_TYPE,
            version=item.version,
            organisation=item.organisation,
            attributes=attributes,
        )
    except ValidationError as e:
        raise TranslationError(str(e), item.id) from e


def payments_from_items(items: list[StoredItem]) -> list[Payment]:
    return [payment_from_item(item) for item in items]

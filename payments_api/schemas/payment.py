"""Payment Schemas — the API-facing payment and its request/response envelopes.

Invariants:
    - Payment.id and Payment.organisation are non-blank after stripping
    - Payment.type is the literal tag "Payment"
    - Payment.version is an integer in [0, MAX_VERSION] (the optimistic-lock token,
      a signed 64-bit column)
    - attributes.amount is a finite decimal string greater than zero
    - Unknown attribute fields are kept and round-trip unchanged

Design Decisions:
    - organisation accepted as "organisation_id" or "organisation", emitted as
      "organisation_id" (the wire name used by existing clients)
    - amount kept as the caller's string: no float rounding on the way through
"""

from decimal import Decimal, InvalidOperation
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


PAYMENT_TYPE = "Payment"
MAX_VERSION = 2**63 - 1


class PaymentAttributes(BaseModel):
    """Payment details. Only amount is validated; the rest is opaque."""

    model_config = ConfigDict(extra="allow")

    amount: str

    @field_validator("amount")
    @classmethod
    def check_amount_positive(cls, v: str) -> str:
        try:
            amount = Decimal(v)
        except InvalidOperation:
            raise ValueError("Invalid payment amount")
        if not amount.is_finite() or amount <= 0:
            raise ValueError("Payment amount must be positive")
        return v


class Payment(BaseModel):
    """A payment resource."""

    id: str
    type: Literal["Payment"]
    version: int = Field(0, ge=0, le=MAX_VERSION)
    organisation: str = Field(
        validation_alias=AliasChoices("organisation_id", "organisation"),
        serialization_alias="organisation_id",
    )
    attributes: PaymentAttributes

    @field_validator("id", "organisation")
    @classmethod
    def strip_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class PaymentRequest(BaseModel):
    """Inbound body for create and update: the payment lives under 'data'."""
    data: Payment


class PaymentResponse(BaseModel):
    data: Payment
    links: dict[str, str]


class PaymentsResponse(BaseModel):
    data: list[Payment]
    links: dict[str, str]


class RepoInfoResponse(BaseModel):
    """Administrative view of the store."""
    count: int


class HealthResponse(BaseModel):
    status: Literal["up", "down"]

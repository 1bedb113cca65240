"""DTOs for payment gateway webhook events."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from core.domain.enums import OrderStatus


class PaymentEventDTO(BaseModel):
    """
    Verified gateway event, already parsed.

    The order is located by ``order_id`` (metadata set at checkout),
    falling back to ``payment_intent_ref``.
    """

    event_id: str = Field(..., min_length=1, description="Provider event id (idempotency key)")
    event_type: str = Field(..., description="Gateway event type, e.g. payment_intent.succeeded")
    order_id: Optional[str] = Field(None, description="Application order reference")
    payment_intent_ref: Optional[str] = Field(None, description="Gateway payment intent id")
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    model_config = {"frozen": True}


PaymentEventOutcome = Literal["applied", "duplicate", "noop", "ignored"]


class PaymentEventResultDTO(BaseModel):
    event_id: str
    outcome: PaymentEventOutcome
    order_id: Optional[str] = None
    status: Optional[OrderStatus] = None
    tokens_issued: int = 0

    model_config = {"frozen": True}

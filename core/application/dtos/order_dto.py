"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.entities.order import Order
from core.domain.enums import OrderStatus, PaymentStatus


class OrderItemDTO(BaseModel):
    """DTO for order line item."""

    id: str = Field(..., description="Line item id")
    product_id: str = Field(..., description="Product id")
    seller_id: str = Field(..., description="Seller id")
    product_title: str = Field(..., description="Title at purchase time")
    product_description: str = Field(default="", description="Description at purchase time")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    unit_price: Decimal = Field(..., ge=0, description="Unit price at purchase time")

    model_config = {"frozen": True}


class AttachPaymentIntentRequest(BaseModel):
    """Links the gateway's payment intent to a pending order."""

    payment_intent_ref: str = Field(..., min_length=1, description="Gateway payment intent id")

    model_config = {"frozen": True}


class CancelOrderRequest(BaseModel):
    """Request DTO for cancelling an order."""

    reason: Optional[str] = Field(None, max_length=500, description="Cancellation reason")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: str = Field(..., description="Order id")
    order_number: str = Field(..., description="Human readable ORD-YYYYMMDD-NNN number")
    buyer_id: str = Field(..., description="Buyer id")
    status: OrderStatus = Field(..., description="Lifecycle status")
    payment_status: PaymentStatus = Field(..., description="Gateway payment status")
    items: List[OrderItemDTO] = Field(default_factory=list, description="Order items")
    subtotal: Decimal = Field(..., ge=0, description="Sum of line items")
    platform_fee_rate: Decimal = Field(..., ge=0, description="Fee rate in percent")
    platform_fee: Decimal = Field(..., ge=0, description="Platform fee")
    total: Decimal = Field(..., ge=0, description="Amount charged to the buyer")
    seller_amount: Decimal = Field(..., ge=0, description="Amount owed to sellers")
    currency: str = Field(default="USD", description="Currency code")
    payment_intent_ref: Optional[str] = Field(None, description="Gateway payment intent id")
    payment_error_code: Optional[str] = None
    payment_error_message: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: datetime
    paid_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, order: Order) -> "OrderDTO":
        return cls(
            id=order.id,
            order_number=str(order.order_number),
            buyer_id=order.buyer_id,
            status=order.status,
            payment_status=order.payment_status,
            items=[
                OrderItemDTO(
                    id=item.id,
                    product_id=item.product_id,
                    seller_id=item.seller_id,
                    product_title=item.product_title_snapshot,
                    product_description=item.product_description_snapshot,
                    quantity=item.quantity,
                    unit_price=item.unit_price.amount,
                )
                for item in order.items
            ],
            subtotal=order.subtotal.amount,
            platform_fee_rate=order.platform_fee_rate,
            platform_fee=order.platform_fee.amount,
            total=order.total.amount,
            seller_amount=order.seller_amount.amount,
            currency=order.currency,
            payment_intent_ref=order.payment_intent_ref,
            payment_error_code=order.payment_error_code,
            payment_error_message=order.payment_error_message,
            cancel_reason=order.cancel_reason,
            created_at=order.created_at,
            paid_at=order.paid_at,
            completed_at=order.completed_at,
            cancelled_at=order.cancelled_at,
        )


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    total: int = Field(..., ge=0, description="Number of orders returned")

    model_config = {"frozen": True}

"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi

State machine:

    PENDING -> PROCESSING -> COMPLETED
    PENDING | PROCESSING -> FAILED
    PENDING | PROCESSING -> CANCELLED

COMPLETED, FAILED and CANCELLED are terminal. Financial fields are fixed
at creation and never recomputed.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional
import uuid

from ..clock import utc_now
from ..enums import OrderStatus, PaymentStatus
from ..events.base import DomainEvent
from ..exceptions import InvalidStateTransition, ValidationError
from ..services.pricing import compute_totals
from ..value_objects import Money, OrderNumber
from .cart import CartLineItem
from .product import Product


_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({
        OrderStatus.PROCESSING,
        OrderStatus.COMPLETED,
        OrderStatus.FAILED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.PROCESSING: frozenset({
        OrderStatus.COMPLETED,
        OrderStatus.FAILED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.FAILED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderLineItem:
    """Immutable snapshot of a product at purchase time."""
    product_id: str
    seller_id: str
    unit_price: Money
    product_title_snapshot: str
    product_description_snapshot: str = ""
    quantity: int = 1
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_cart_item(cls, item: CartLineItem, product: Product) -> "OrderLineItem":
        """Price comes from the cart snapshot, text from the current listing."""
        return cls(
            product_id=item.product_id,
            seller_id=product.seller_id,
            unit_price=item.unit_price_snapshot,
            product_title_snapshot=product.title,
            product_description_snapshot=product.description or "",
            quantity=item.quantity,
        )

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Order:
    """
    Order aggregate root.

    Owns its line items and, transitively, the download tokens minted from
    them. Mutated only through the transition methods below.
    """
    order_number: OrderNumber
    buyer_id: str
    items: List[OrderLineItem]
    subtotal: Money
    platform_fee: Money
    total: Money
    platform_fee_rate: Decimal
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_intent_ref: Optional[str] = None
    payment_error_code: Optional[str] = None
    payment_error_message: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    paid_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    # Event collection
    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    # =========================================================================
    # FACTORY
    # =========================================================================

    @classmethod
    def create(
        cls,
        order_number: OrderNumber,
        buyer_id: str,
        items: List[OrderLineItem],
        fee_rate_percent: Decimal,
    ) -> "Order":
        """
        Create a PENDING order with an immutable financial snapshot.

        The order currency is the currency the line items were priced in.

        Raises:
            ValidationError: No items, or items priced in different currencies
        """
        if not items:
            raise ValidationError("Cannot create an order without items")
        currencies = {item.unit_price.currency for item in items}
        if len(currencies) > 1:
            raise ValidationError(
                f"Order items are priced in different currencies: {', '.join(sorted(currencies))}"
            )
        currency = currencies.pop()

        totals = compute_totals([item.line_total.amount for item in items], fee_rate_percent)
        order = cls(
            order_number=order_number,
            buyer_id=buyer_id,
            items=list(items),
            subtotal=Money(totals.subtotal, currency),
            platform_fee=Money(totals.platform_fee, currency),
            total=Money(totals.total, currency),
            platform_fee_rate=totals.fee_rate_percent,
        )

        from ..events.order_events import OrderCreatedEvent

        order._record_event(
            OrderCreatedEvent(
                order_id=order.id,
                order_number=str(order.order_number),
                buyer_id=buyer_id,
                total_amount=str(order.total.amount),
                currency=currency,
                item_count=len(items),
            )
        )
        return order

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def currency(self) -> str:
        return self.total.currency

    @property
    def seller_amount(self) -> Money:
        """Buyer-paid surcharge model: sellers receive the full subtotal."""
        return self.subtotal

    @property
    def seller_ids(self) -> List[str]:
        """Distinct sellers, in line item order."""
        return list(dict.fromkeys(item.seller_id for item in self.items))

    def contains_product(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)

    def involves_seller(self, seller_id: str) -> bool:
        return seller_id in self.seller_ids

    def can_transition(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self.status]

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def attach_payment_intent(self, payment_intent_ref: str) -> None:
        """Link the gateway payment intent created for this order."""
        if self.status.is_terminal:
            raise InvalidStateTransition(self.status.value, "attach_payment_intent")
        self.payment_intent_ref = payment_intent_ref

    def mark_processing(self) -> None:
        """Gateway acknowledged the payment intent."""
        self._transition(OrderStatus.PROCESSING, "Payment processing")
        self.payment_status = PaymentStatus.PROCESSING

    def mark_completed(self, now: Optional[datetime] = None) -> None:
        """Payment succeeded. Tokens are minted by the caller in the same transaction."""
        now = now or utc_now()
        self._transition(OrderStatus.COMPLETED, "Payment succeeded")
        self.payment_status = PaymentStatus.SUCCEEDED
        self.paid_at = now
        self.completed_at = now

    def mark_failed(self, error_code: Optional[str], error_message: Optional[str]) -> None:
        """Payment failed. No tokens, cart is not restored."""
        self._transition(OrderStatus.FAILED, error_message or "Payment failed")
        self.payment_status = PaymentStatus.FAILED
        self.payment_error_code = error_code
        self.payment_error_message = error_message

        from ..events.order_events import OrderFailedEvent

        self._record_event(
            OrderFailedEvent(
                order_id=self.id,
                order_number=str(self.order_number),
                buyer_id=self.buyer_id,
                error_code=error_code,
                error_message=error_message,
            )
        )

    def cancel(self, reason: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """Buyer, admin or gateway cancellation of a non-terminal order."""
        self._transition(OrderStatus.CANCELLED, reason or "Cancelled")
        self.cancel_reason = reason
        self.cancelled_at = now or utc_now()
        if self.payment_status in (PaymentStatus.UNPAID, PaymentStatus.PROCESSING):
            self.payment_status = PaymentStatus.CANCELED

        from ..events.order_events import OrderCancelledEvent

        self._record_event(
            OrderCancelledEvent(
                order_id=self.id,
                order_number=str(self.order_number),
                buyer_id=self.buyer_id,
                reason=reason,
            )
        )

    def record_completion(self, token_count: int) -> None:
        """Record the completion event once tokens exist."""
        from ..events.order_events import OrderCompletedEvent

        self._record_event(
            OrderCompletedEvent(
                order_id=self.id,
                order_number=str(self.order_number),
                buyer_id=self.buyer_id,
                seller_ids=self.seller_ids,
                product_titles=[item.product_title_snapshot for item in self.items],
                total_amount=str(self.total.amount),
                currency=self.currency,
                token_count=token_count,
            )
        )

    def _transition(self, target: OrderStatus, reason: Optional[str] = None) -> OrderStatus:
        """
        Apply a state machine transition.

        Raises:
            InvalidStateTransition: If target is not reachable from current status
        """
        if not self.can_transition(target):
            raise InvalidStateTransition(self.status.value, target.value)

        previous = self.status
        self.status = target
        self._record_status_change(previous, target, reason)
        return previous

    # =========================================================================
    # EVENT COLLECTION
    # =========================================================================

    def get_domain_events(self) -> List[DomainEvent]:
        """
        Get all domain events collected by this aggregate.

        Returns:
            List of domain events (published after commit)
        """
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        """Clear all collected domain events (after publishing)."""
        self._domain_events.clear()

    def _record_status_change(
        self, previous_status: OrderStatus, new_status: OrderStatus, reason: Optional[str] = None
    ) -> None:
        from ..events.order_events import OrderStatusChangedEvent

        self._record_event(
            OrderStatusChangedEvent(
                order_id=self.id,
                order_number=str(self.order_number),
                previous_status=previous_status.value,
                new_status=new_status.value,
                reason=reason,
            )
        )

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal

from core.domain.entities import (
    CartLineItem,
    DownloadToken,
    Order,
    OrderLineItem,
    Product,
    Review,
    ReviewReport,
    ReviewResponse,
    ReviewVote,
)
from core.domain.enums import (
    OrderStatus,
    PaymentStatus,
    ProductStatus,
    ReviewStatus,
    VoteType,
)
from core.domain.value_objects import Money, OrderNumber

from .models import (
    CartItemModel,
    DownloadTokenModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    ReviewModel,
    ReviewReportModel,
    ReviewResponseModel,
    ReviewVoteModel,
)


def _money(amount, currency: str) -> Money:
    return Money(amount=Decimal(str(amount)), currency=currency)


class ProductMapper:
    """Static mapper for Product ↔ ProductModel transformation."""

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            seller_id=model.seller_id,
            title=model.title,
            price=_money(model.price_amount, model.price_currency),
            status=ProductStatus(model.status),
            description=model.description or "",
            file_ref=model.file_ref,
        )

    @staticmethod
    def to_persistence(entity: Product) -> ProductModel:
        return ProductModel(
            id=entity.id,
            seller_id=entity.seller_id,
            title=entity.title,
            description=entity.description,
            price_amount=entity.price.amount,
            price_currency=entity.price.currency,
            status=entity.status.value,
            file_ref=entity.file_ref,
        )


class CartItemMapper:
    """Static mapper for CartLineItem ↔ CartItemModel transformation."""

    @staticmethod
    def to_domain(model: CartItemModel) -> CartLineItem:
        return CartLineItem(
            id=model.id,
            buyer_id=model.buyer_id,
            product_id=model.product_id,
            seller_id=model.seller_id,
            product_title=model.product_title,
            unit_price_snapshot=_money(model.unit_price_amount, model.unit_price_currency),
            quantity=model.quantity,
            added_at=model.added_at,
        )

    @staticmethod
    def to_persistence(entity: CartLineItem) -> CartItemModel:
        return CartItemModel(
            id=entity.id,
            buyer_id=entity.buyer_id,
            product_id=entity.product_id,
            seller_id=entity.seller_id,
            product_title=entity.product_title,
            unit_price_amount=entity.unit_price_snapshot.amount,
            unit_price_currency=entity.unit_price_snapshot.currency,
            quantity=entity.quantity,
            added_at=entity.added_at,
        )


class OrderItemMapper:
    """Static mapper for OrderLineItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderLineItem:
        """Convert ORM model to domain entity.

        Args:
            model: OrderItemModel instance

        Returns:
            OrderLineItem domain entity
        """
        return OrderLineItem(
            id=model.id,
            product_id=model.product_id,
            seller_id=model.seller_id,
            unit_price=_money(model.unit_price_amount, model.unit_price_currency),
            product_title_snapshot=model.product_title_snapshot,
            product_description_snapshot=model.product_description_snapshot or "",
            quantity=model.quantity,
        )

    @staticmethod
    def to_persistence(entity: OrderLineItem, order_id: str) -> OrderItemModel:
        """Convert domain entity to ORM model.

        Args:
            entity: OrderLineItem domain entity
            order_id: Owning order id

        Returns:
            OrderItemModel instance
        """
        return OrderItemModel(
            id=entity.id,
            order_id=order_id,
            product_id=entity.product_id,
            seller_id=entity.seller_id,
            unit_price_amount=entity.unit_price.amount,
            unit_price_currency=entity.unit_price.currency,
            product_title_snapshot=entity.product_title_snapshot,
            product_description_snapshot=entity.product_description_snapshot,
            quantity=entity.quantity,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Args:
            model: OrderModel instance

        Returns:
            Order domain aggregate
        """
        items = [OrderItemMapper.to_domain(item_model) for item_model in model.items]

        return Order(
            id=model.id,
            order_number=OrderNumber(value=model.order_number),
            buyer_id=model.buyer_id,
            items=items,
            subtotal=_money(model.subtotal_amount, model.currency),
            platform_fee=_money(model.platform_fee_amount, model.currency),
            total=_money(model.total_amount, model.currency),
            platform_fee_rate=Decimal(str(model.platform_fee_rate)),
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            payment_intent_ref=model.payment_intent_ref,
            payment_error_code=model.payment_error_code,
            payment_error_message=model.payment_error_message,
            cancel_reason=model.cancel_reason,
            created_at=model.created_at,
            paid_at=model.paid_at,
            completed_at=model.completed_at,
            cancelled_at=model.cancelled_at,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert domain aggregate to ORM model (with nested items).

        Args:
            entity: Order domain aggregate

        Returns:
            OrderModel instance
        """
        order_model = OrderModel(
            id=entity.id,
            order_number=entity.order_number.value,
            buyer_id=entity.buyer_id,
            subtotal_amount=entity.subtotal.amount,
            platform_fee_amount=entity.platform_fee.amount,
            total_amount=entity.total.amount,
            platform_fee_rate=entity.platform_fee_rate,
            currency=entity.currency,
            created_at=entity.created_at,
        )
        OrderMapper.update_persistence(entity, order_model)

        order_model.items = [
            OrderItemMapper.to_persistence(item, entity.id) for item in entity.items
        ]
        return order_model

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> OrderModel:
        """Copy the mutable lifecycle fields. Financial snapshot and items never change."""
        model.status = entity.status.value
        model.payment_status = entity.payment_status.value
        model.payment_intent_ref = entity.payment_intent_ref
        model.payment_error_code = entity.payment_error_code
        model.payment_error_message = entity.payment_error_message
        model.cancel_reason = entity.cancel_reason
        model.paid_at = entity.paid_at
        model.completed_at = entity.completed_at
        model.cancelled_at = entity.cancelled_at
        return model

    @staticmethod
    def lifecycle_values(entity: Order) -> dict:
        """Column values for a conditional UPDATE of the lifecycle fields."""
        return {
            "status": entity.status.value,
            "payment_status": entity.payment_status.value,
            "payment_intent_ref": entity.payment_intent_ref,
            "payment_error_code": entity.payment_error_code,
            "payment_error_message": entity.payment_error_message,
            "cancel_reason": entity.cancel_reason,
            "paid_at": entity.paid_at,
            "completed_at": entity.completed_at,
            "cancelled_at": entity.cancelled_at,
        }


class DownloadTokenMapper:
    """Static mapper for DownloadToken ↔ DownloadTokenModel transformation."""

    @staticmethod
    def to_domain(model: DownloadTokenModel) -> DownloadToken:
        return DownloadToken(
            id=model.id,
            token=model.token,
            order_id=model.order_id,
            product_id=model.product_id,
            buyer_id=model.buyer_id,
            download_limit=model.download_limit,
            expires_at=model.expires_at,
            download_count=model.download_count,
            is_active=model.is_active,
            created_at=model.created_at,
            last_download_at=model.last_download_at,
            last_ip_address=model.last_ip_address,
            last_user_agent=model.last_user_agent,
        )

    @staticmethod
    def to_persistence(entity: DownloadToken) -> DownloadTokenModel:
        return DownloadTokenModel(
            id=entity.id,
            token=entity.token,
            order_id=entity.order_id,
            product_id=entity.product_id,
            buyer_id=entity.buyer_id,
            download_limit=entity.download_limit,
            expires_at=entity.expires_at,
            download_count=entity.download_count,
            is_active=entity.is_active,
            created_at=entity.created_at,
            last_download_at=entity.last_download_at,
            last_ip_address=entity.last_ip_address,
            last_user_agent=entity.last_user_agent,
        )


class ReviewMapper:
    """Static mapper for Review and its satellites."""

    @staticmethod
    def to_domain(model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            order_id=model.order_id,
            product_id=model.product_id,
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            rating=model.rating,
            comment=model.comment,
            title=model.title,
            pros=model.pros,
            cons=model.cons,
            status=ReviewStatus(model.status),
            is_verified=model.is_verified,
            helpful_count=model.helpful_count,
            not_helpful_count=model.not_helpful_count,
            report_count=model.report_count,
            moderated_by=model.moderated_by,
            moderated_at=model.moderated_at,
            moderation_reason=model.moderation_reason,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Review) -> ReviewModel:
        model = ReviewModel(
            id=entity.id,
            order_id=entity.order_id,
            product_id=entity.product_id,
            buyer_id=entity.buyer_id,
            seller_id=entity.seller_id,
            rating=entity.rating,
            comment=entity.comment,
            title=entity.title,
            pros=entity.pros,
            cons=entity.cons,
            is_verified=entity.is_verified,
            created_at=entity.created_at,
        )
        return ReviewMapper.update_persistence(entity, model)

    @staticmethod
    def update_persistence(entity: Review, model: ReviewModel) -> ReviewModel:
        model.rating = entity.rating
        model.comment = entity.comment
        model.title = entity.title
        model.pros = entity.pros
        model.cons = entity.cons
        model.status = entity.status.value
        model.helpful_count = entity.helpful_count
        model.not_helpful_count = entity.not_helpful_count
        model.report_count = entity.report_count
        model.moderated_by = entity.moderated_by
        model.moderated_at = entity.moderated_at
        model.moderation_reason = entity.moderation_reason
        return model

    @staticmethod
    def vote_to_domain(model: ReviewVoteModel) -> ReviewVote:
        return ReviewVote(review_id=model.review_id, user_id=model.user_id, vote=VoteType(model.vote))

    @staticmethod
    def response_to_domain(model: ReviewResponseModel) -> ReviewResponse:
        return ReviewResponse(
            id=model.id,
            review_id=model.review_id,
            seller_id=model.seller_id,
            comment=model.comment,
            created_at=model.created_at,
        )

    @staticmethod
    def response_to_persistence(entity: ReviewResponse) -> ReviewResponseModel:
        return ReviewResponseModel(
            id=entity.id,
            review_id=entity.review_id,
            seller_id=entity.seller_id,
            comment=entity.comment,
            created_at=entity.created_at,
        )

    @staticmethod
    def report_to_persistence(entity: ReviewReport) -> ReviewReportModel:
        return ReviewReportModel(
            id=entity.id,
            review_id=entity.review_id,
            user_id=entity.user_id,
            reason=entity.reason,
            details=entity.details,
            created_at=entity.created_at,
        )

"""Application DTOs."""

from .cart_dto import AddToCartRequest, CartDTO, CartItemDTO, CartSummaryDTO
from .download_dto import DownloadGrantDTO, DownloadTokenDTO, SellerDownloadStatsDTO
from .order_dto import (
    AttachPaymentIntentRequest,
    CancelOrderRequest,
    OrderDTO,
    OrderItemDTO,
    OrderListDTO,
)
from .payment_dto import PaymentEventDTO, PaymentEventResultDTO
from .review_dto import (
    CreateReviewRequest,
    ModerateReviewRequest,
    RatingStatsDTO,
    ReportReviewRequest,
    RespondToReviewRequest,
    ReviewDTO,
    ReviewListDTO,
    ReviewResponseDTO,
    SellerRatingStatsDTO,
    UpdateReviewRequest,
    VoteReviewRequest,
)

__all__ = [
    "AddToCartRequest",
    "AttachPaymentIntentRequest",
    "CancelOrderRequest",
    "CartDTO",
    "CartItemDTO",
    "CartSummaryDTO",
    "CreateReviewRequest",
    "DownloadGrantDTO",
    "DownloadTokenDTO",
    "ModerateReviewRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PaymentEventDTO",
    "PaymentEventResultDTO",
    "RatingStatsDTO",
    "ReportReviewRequest",
    "RespondToReviewRequest",
    "ReviewDTO",
    "ReviewListDTO",
    "ReviewResponseDTO",
    "SellerDownloadStatsDTO",
    "SellerRatingStatsDTO",
    "UpdateReviewRequest",
    "VoteReviewRequest",
]

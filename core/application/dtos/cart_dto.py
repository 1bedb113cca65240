"""Application DTOs for Cart operations."""

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1, description="Product to add")

    model_config = {"frozen": True}


class CartItemDTO(BaseModel):
    """Cart line item with its price snapshot."""

    id: str
    product_id: str
    seller_id: str
    product_title: str
    unit_price: Decimal = Field(..., ge=0, description="Price captured when added")
    currency: str = "USD"
    quantity: int = Field(default=1, gt=0)
    added_at: datetime
    available: bool = Field(default=True, description="False if the listing is no longer purchasable")

    model_config = {"frozen": True}


class CartSummaryDTO(BaseModel):
    item_count: int = Field(..., ge=0)
    subtotal: Decimal
    platform_fee_rate: Decimal
    platform_fee: Decimal
    total: Decimal
    currency: str = "USD"

    model_config = {"frozen": True}


class CartDTO(BaseModel):
    buyer_id: str
    items: List[CartItemDTO] = Field(default_factory=list)
    summary: CartSummaryDTO
    unavailable_product_ids: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

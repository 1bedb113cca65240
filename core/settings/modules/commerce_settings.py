from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import FurniblesBaseSettings


class CommerceSettings(FurniblesBaseSettings):
    """
    Marketplace business rules.
    Loaded automatically from .env with prefix FURNIBLES_*
    """

    platform_fee_rate_percent: Decimal = Field(default=Decimal("10"), ge=0, le=100)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    max_cart_items: int = Field(default=10, ge=1)

    download_limit: int = Field(default=5, ge=1)
    download_expiry_days: int = Field(default=30, ge=1)

    review_min_comment_length: int = Field(default=10, ge=0)
    review_denylist: List[str] = Field(default_factory=lambda: ["spam", "fake", "scam"])
    report_flag_threshold: int = Field(default=3, ge=1)

    pending_order_ttl_hours: int = Field(default=24, ge=1)
    abandoned_cart_days: int = Field(default=30, ge=1)

    storage_root: str = "./storage"
    webhook_secret: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FURNIBLES_",
        extra="ignore",
    )

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    @field_validator("review_denylist")
    @classmethod
    def _normalize_denylist(cls, value: List[str]) -> List[str]:
        return [word.strip().lower() for word in value if word.strip()]

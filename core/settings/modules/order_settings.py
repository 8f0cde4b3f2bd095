from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class OrderProcessingSettings(OrdersBaseSettings):
    """
    Order processing and batch settings.
    Loaded from .env file with exact variable name matching.
    """

    batch_limit: int = Field(default=10, gt=0, alias="ORDERS_BATCH_LIMIT")
    inter_order_pause_seconds: float = Field(default=1.0, ge=0, alias="ORDERS_INTER_ORDER_PAUSE_SECONDS")
    batch_interval_seconds: float = Field(default=300.0, gt=0, alias="ORDERS_BATCH_INTERVAL_SECONDS")
    stats_interval_seconds: float = Field(default=3600.0, gt=0, alias="ORDERS_STATS_INTERVAL_SECONDS")
    total_tolerance: float = Field(default=0.01, ge=0, alias="ORDERS_TOTAL_TOLERANCE")
    low_stock_factor: float = Field(default=1.5, ge=1, alias="ORDERS_LOW_STOCK_FACTOR")
    default_cancellation_reason: str = Field(default="unspecified", alias="ORDERS_DEFAULT_CANCELLATION_REASON")

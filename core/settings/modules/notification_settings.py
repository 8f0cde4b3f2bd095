from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class NotificationSettings(OrdersBaseSettings):
    """
    Notification dispatch settings.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(default=True, alias="NOTIFY_ENABLED")
    webhook_url: str = Field(default="", alias="NOTIFY_WEBHOOK_URL")
    prefix: str = Field(default="[ORDERS]", alias="NOTIFY_PREFIX")
    timeout_seconds: float = Field(default=10.0, gt=0, alias="NOTIFY_TIMEOUT_SECONDS")

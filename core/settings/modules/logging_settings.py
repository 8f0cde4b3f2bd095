from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class LoggingSettings(OrdersBaseSettings):
    """
    Logging settings.
    Loaded from .env file with exact variable name matching.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")

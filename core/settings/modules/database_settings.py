from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class DatabaseSettings(OrdersBaseSettings):
    """
    Order store database settings.
    Loaded from .env file with exact variable name matching.
    """

    database_url: str = Field(default="sqlite+aiosqlite:///./orders.db", alias="DB_DATABASE_URL")
    echo_sql: bool = Field(default=False, alias="DB_ECHO_SQL")

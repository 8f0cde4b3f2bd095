from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.logging_settings import LoggingSettings
from core.settings.modules.notification_settings import NotificationSettings
from core.settings.modules.order_settings import OrderProcessingSettings
from core.settings.modules.workflow_settings import WorkflowSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    logging: LoggingSettings
    orders: OrderProcessingSettings
    workflow: WorkflowSettings
    database: DatabaseSettings
    notifications: NotificationSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings(
        logging=LoggingSettings(),
        orders=OrderProcessingSettings(),
        workflow=WorkflowSettings(),
        database=DatabaseSettings(),
        notifications=NotificationSettings(),
    )

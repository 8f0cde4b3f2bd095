# Settings package
from core.settings.modules import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    NotificationSettings,
    OrderProcessingSettings,
    WorkflowSettings,
    get_app_settings,
)

__all__ = [
    "get_app_settings",
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "NotificationSettings",
    "OrderProcessingSettings",
    "WorkflowSettings",
]

# Settings modules
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings
from .logging_settings import LoggingSettings
from .notification_settings import NotificationSettings
from .order_settings import OrderProcessingSettings
from .workflow_settings import WorkflowSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "DatabaseSettings",
    "LoggingSettings",
    "NotificationSettings",
    "OrderProcessingSettings",
    "WorkflowSettings",
]

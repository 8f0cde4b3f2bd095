"""Notification dispatcher adapters.

Only the console mock is exported here; the aiohttp-backed
``webhook_notification_dispatcher`` module is imported directly by callers
that need it.
"""

from .mock_notification_dispatcher import MockNotificationDispatcher

__all__ = ["MockNotificationDispatcher"]

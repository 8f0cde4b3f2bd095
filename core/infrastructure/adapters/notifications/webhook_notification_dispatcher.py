"""
Webhook Notification Dispatcher Implementation.

Posts order notifications as JSON to a configured webhook.
"""
from typing import Any, Dict, Optional
import base64
import logging

import aiohttp

from core.application.interfaces import INotificationDispatcher
from core.settings.modules.notification_settings import NotificationSettings


logger = logging.getLogger(__name__)


class WebhookNotificationDispatcher(INotificationDispatcher):
    """
    Webhook implementation of notification dispatcher.
    
    Delivery problems are logged and reported as False, never raised.
    """
    
    def __init__(self, settings: NotificationSettings):
        """
        Initialize webhook dispatcher.
        
        Args:
            settings: Notification settings with webhook URL
        """
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        logger.info("WebhookNotificationDispatcher initialized")
    
    async def send_order_confirmation(
        self,
        order_id: str,
        attachment: Optional[bytes] = None
    ) -> bool:
        """Send order confirmation via webhook."""
        payload: Dict[str, Any] = {
            "type": "order_confirmation",
            "order_id": order_id,
            "text": f"{self.prefix} Order {order_id} confirmed",
        }
        if attachment:
            payload["attachment"] = {
                "filename": f"proof-of-purchase-{order_id}.txt",
                "content_base64": base64.b64encode(attachment).decode("ascii"),
            }
        return await self._post(payload)
    
    async def send_status_update(self, order_id: str, new_status: str) -> bool:
        """Send order status update via webhook."""
        payload = {
            "type": "status_update",
            "order_id": order_id,
            "status": new_status,
            "text": f"{self.prefix} Order {order_id} is now {new_status}",
        }
        return await self._post(payload)
    
    async def _post(self, payload: Dict[str, Any]) -> bool:
        """
        Post payload to the webhook.
        
        Args:
            payload: JSON body
        
        Returns:
            True on a 2xx response
        """
        if not self.settings.enabled:
            logger.info("Notifications disabled, skipping")
            return False
        
        if not self.webhook_url:
            logger.warning("Notification webhook_url not configured, skipping notification")
            return False
        
        try:
            timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status >= 300:
                        error_text = await response.text()
                        logger.error(f"Webhook error: {response.status} - {error_text}")
                        return False
                    logger.info(f"Notification '{payload['type']}' sent for order {payload['order_id']}")
                    return True
        except Exception as e:
            logger.error(f"Failed to send notification: {e}", exc_info=True)
            return False

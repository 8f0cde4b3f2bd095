"""
Mock Notification Dispatcher Implementation.

This simulates customer notifications for testing and demos.
"""
from typing import Optional
import logging

from core.application.interfaces import INotificationDispatcher


logger = logging.getLogger(__name__)


class MockNotificationDispatcher(INotificationDispatcher):
    """
    Mock implementation of notification dispatcher.
    
    Logs notifications instead of actually sending them.
    Set ``fail_confirmations`` / ``fail_status_updates`` to simulate
    delivery failures.
    """
    
    def __init__(self, fail_confirmations: bool = False, fail_status_updates: bool = False):
        """Initialize mock notification dispatcher."""
        self.notifications_sent = []
        self.fail_confirmations = fail_confirmations
        self.fail_status_updates = fail_status_updates
        logger.info("MockNotificationDispatcher initialized (console logging)")
    
    async def send_order_confirmation(
        self,
        order_id: str,
        attachment: Optional[bytes] = None
    ) -> bool:
        """
        Simulate order confirmation.
        
        Args:
            order_id: Order ID
            attachment: Proof of purchase bytes
        
        Returns:
            False when configured to fail, True otherwise
        """
        if self.fail_confirmations:
            logger.error(f"❌ 🔔 CONFIRMATION FAILED: order {order_id}")
            return False
        
        self.notifications_sent.append({
            "type": "order_confirmation",
            "order_id": order_id,
            "attachment_size": len(attachment) if attachment else 0,
        })
        logger.info(
            f"✅ 🔔 ORDER CONFIRMATION:\n"
            f"   Order: {order_id}\n"
            f"   Attachment: {len(attachment) if attachment else 0} bytes"
        )
        return True
    
    async def send_status_update(self, order_id: str, new_status: str) -> bool:
        """
        Simulate status update notification.
        
        Args:
            order_id: Order ID
            new_status: New order status
        
        Returns:
            False when configured to fail, True otherwise
        """
        if self.fail_status_updates:
            logger.error(f"❌ 🔔 STATUS UPDATE FAILED: order {order_id} -> {new_status}")
            return False
        
        self.notifications_sent.append({
            "type": "status_update",
            "order_id": order_id,
            "status": new_status,
        })
        logger.info(f"🔔 STATUS UPDATE: order {order_id} -> {new_status}")
        return True
    
    def get_notifications(self) -> list:
        """Get all sent notifications (for testing)."""
        return self.notifications_sent
    
    def clear(self) -> None:
        """Clear notifications (for testing)."""
        self.notifications_sent.clear()
        logger.info("🗑️ Notifications cleared")

"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Optional


class IDocumentRenderer(ABC):
    """
    Interface for proof-of-purchase rendering.
    
    Rendering internals (templates, PDF engines) live behind this
    interface and are not part of the order pipeline.
    """
    
    @abstractmethod
    async def render_proof_of_purchase(self, order_id: str) -> bytes:
        """
        Render the proof-of-purchase document for an order.
        
        Args:
            order_id: Order ID
        
        Returns:
            Rendered document bytes
        
        Raises:
            Exception: If rendering fails
        """
        pass


class INotificationDispatcher(ABC):
    """
    Interface for customer notification delivery.
    
    Implementations never raise: delivery problems are reported
    by returning False.
    """
    
    @abstractmethod
    async def send_order_confirmation(
        self,
        order_id: str,
        attachment: Optional[bytes] = None
    ) -> bool:
        """
        Send the order confirmation message.
        
        Args:
            order_id: Order ID
            attachment: Rendered proof of purchase to attach
        
        Returns:
            True if delivered, False otherwise
        """
        pass
    
    @abstractmethod
    async def send_status_update(self, order_id: str, new_status: str) -> bool:
        """
        Send an order status change message.
        
        Args:
            order_id: Order ID
            new_status: Status the order moved to
        
        Returns:
            True if delivered, False otherwise
        """
        pass


__all__ = ["IDocumentRenderer", "INotificationDispatcher"]

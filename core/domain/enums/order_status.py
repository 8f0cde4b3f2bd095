"""
Order Status Enum.

Lifecycle states an order moves through.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status values."""

    PENDING = "pending"
    VALIDATED = "validated"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Cancelled orders never leave their state."""
        return self is OrderStatus.CANCELLED

"""Domain enums."""

from .execution_status import ExecutionStatus
from .order_status import OrderStatus

__all__ = ["ExecutionStatus", "OrderStatus"]

"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderLine, ProductStock
from .enums import ExecutionStatus, OrderStatus
from .value_objects import ExecutionID
from .exceptions import OrderNotFoundError, OrderProcessingError
from .repositories import OrderStoreGateway

__all__ = [
    "ExecutionID",
    "ExecutionStatus",
    "Order",
    "OrderLine",
    "OrderNotFoundError",
    "OrderProcessingError",
    "OrderStatus",
    "OrderStoreGateway",
    "ProductStock",
]

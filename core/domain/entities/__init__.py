"""Domain entities."""

from .order import Order, OrderLine, ProductStock

__all__ = ["Order", "OrderLine", "ProductStock"]

"""Repository and gateway interfaces."""

from .order_gateway import OrderStoreGateway

__all__ = ["OrderStoreGateway"]

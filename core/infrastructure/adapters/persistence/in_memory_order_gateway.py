"""
In-Memory Order Store Gateway.

This is an in-memory implementation for testing and demos.
"""
from copy import deepcopy
from dataclasses import fields, replace
from typing import Any, Dict, List, Optional
import logging

from core.domain.entities.order import Order, ProductStock
from core.domain.enums.order_status import OrderStatus
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.utils.datetime import utc_now


logger = logging.getLogger(__name__)

_WRITABLE_FIELDS = {f.name for f in fields(Order)} - {"id", "lines", "status"}


class InMemoryOrderGateway(OrderStoreGateway):
    """
    In-memory implementation of OrderStoreGateway.

    Orders are copied on the way in and out so callers only ever see
    snapshots, the same as with a remote store.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._orders: Dict[str, Order] = {}
        self._products: Dict[str, ProductStock] = {}
        self.status_history: List[tuple] = []
        logger.info("InMemoryOrderGateway initialized (in-memory storage)")

    # ------------------------------------------------------------------
    # Seeding helpers (for demo/testing)
    # ------------------------------------------------------------------

    def add_order(self, order: Order) -> None:
        """Store an order, replacing any order with the same id."""
        if order.created_at is None:
            order = replace(order, created_at=utc_now())
        self._orders[order.id] = deepcopy(order)

    def add_product(self, product_id: str, name: str, stock: int) -> None:
        """Store a product stock record."""
        self._products[product_id] = ProductStock(product_id=product_id, name=name, stock=stock)

    def stock_of(self, product_id: str) -> Optional[int]:
        """Current stock of a product (for testing)."""
        product = self._products.get(product_id)
        return product.stock if product else None

    def clear(self) -> None:
        """Clear all orders and products (for demo/testing)."""
        self._orders.clear()
        self._products.clear()
        self.status_history.clear()
        logger.info("🗑️ In-memory order store cleared")

    # ------------------------------------------------------------------
    # OrderStoreGateway
    # ------------------------------------------------------------------

    async def get_order(self, order_id: str) -> Optional[Order]:
        """
        Get order snapshot by ID.

        Args:
            order_id: Order ID to lookup

        Returns:
            Order if found, None otherwise
        """
        order = self._orders.get(order_id)
        if order is None:
            logger.info(f"❌ Order not found in memory store: {order_id}")
            return None
        return deepcopy(order)

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Update status and extra fields of a stored order.

        Args:
            order_id: Order ID
            status: New status
            extra_fields: Additional order attributes to write

        Returns:
            True if updated, False if the order does not exist

        Raises:
            ValueError: If an extra field is not a writable order attribute
        """
        order = self._orders.get(order_id)
        if order is None:
            logger.warning(f"⚠️ Order not found for status update: {order_id}")
            return False

        extra_fields = extra_fields or {}
        unknown = set(extra_fields) - _WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown order fields: {sorted(unknown)}")

        order.status = OrderStatus(status)
        order.updated_at = utc_now()
        for name, value in extra_fields.items():
            setattr(order, name, value)

        self.status_history.append((order_id, order.status))
        logger.debug(f"Order {order_id} -> {order.status.value}")
        return True

    async def get_product_stock(self, product_id: str) -> Optional[ProductStock]:
        """Get product stock by ID."""
        return self._products.get(product_id)

    async def set_product_stock(self, product_id: str, new_stock: int) -> bool:
        """Overwrite product stock."""
        product = self._products.get(product_id)
        if product is None:
            return False
        self._products[product_id] = replace(product, stock=new_stock)
        return True

    async def list_orders_by_status(self, status: OrderStatus, limit: int) -> List[str]:
        """List ids of orders in ``status`` in insertion order."""
        matching = [o.id for o in self._orders.values() if o.status == status]
        return matching[:limit]

    async def list_all_order_statuses(self) -> List[str]:
        """Return every stored order's status value."""
        return [o.status.value for o in self._orders.values()]

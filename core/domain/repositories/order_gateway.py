"""Gateway interface for order and product-stock records."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..entities.order import Order, ProductStock
from ..enums.order_status import OrderStatus


class OrderStoreGateway(ABC):
    """Abstract access to the order store.

    Implementations may raise on infrastructure errors; the services that
    consume the gateway decide how failures are reported.
    """

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[Order]:
        """Retrieve an order snapshot.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Write a new status plus any extra order fields.

        Args:
            order_id: Order identifier
            status: New lifecycle status
            extra_fields: Additional order attributes to write
                (``validated_at``, ``cancelled_at``, ``cancellation_reason``,
                ``stock_adjusted``)

        Returns:
            True if the order was updated, False otherwise
        """
        pass

    @abstractmethod
    async def get_product_stock(self, product_id: str) -> Optional[ProductStock]:
        """Read current stock for a product.

        Args:
            product_id: Product identifier

        Returns:
            ProductStock if the product exists, None otherwise
        """
        pass

    @abstractmethod
    async def set_product_stock(self, product_id: str, new_stock: int) -> bool:
        """Overwrite stock for a product.

        Args:
            product_id: Product identifier
            new_stock: Stock level to store

        Returns:
            True if the product was updated, False otherwise
        """
        pass

    @abstractmethod
    async def list_orders_by_status(self, status: OrderStatus, limit: int) -> List[str]:
        """List order ids currently in ``status``.

        Args:
            status: Status to filter on
            limit: Maximum number of ids to return

        Returns:
            List of order ids
        """
        pass

    @abstractmethod
    async def list_all_order_statuses(self) -> List[str]:
        """Return the status of every order, one entry per order."""
        pass

"""
SQLAlchemy Order Store Gateway.

Implements OrderStoreGateway on a relational database. Every call runs in
its own short session; the gateway keeps no state between calls.
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from core.domain.entities.order import Order, OrderLine, ProductStock
from core.domain.enums.order_status import OrderStatus
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.infrastructure.database.models import OrderLineModel, OrderModel, ProductModel


logger = logging.getLogger(__name__)

WRITABLE_ORDER_FIELDS = frozenset(
    {"validated_at", "cancelled_at", "cancellation_reason", "stock_adjusted"}
)


class SQLAlchemyOrderGateway(OrderStoreGateway):
    """
    SQLAlchemy implementation of OrderStoreGateway.

    Database errors propagate to the caller.
    """

    def __init__(self, session_factory: async_sessionmaker):
        """
        Initialize gateway.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    async def get_order(self, order_id: str) -> Optional[Order]:
        """
        Get order by ID with its lines.

        Args:
            order_id: Order ID to lookup

        Returns:
            Order entity if found, None otherwise
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.lines))
                .where(OrderModel.id == order_id)
            )
            order_model = result.scalar_one_or_none()

            if order_model is None:
                logger.info(f"Order not found: {order_id}")
                return None

            return self._to_domain_entity(order_model)

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Update order status and extra fields.

        Args:
            order_id: Order ID
            status: New status
            extra_fields: Additional order columns to write

        Returns:
            True if a row was updated, False if the order does not exist

        Raises:
            ValueError: If an extra field is not a writable column
        """
        extra_fields = extra_fields or {}
        unknown = set(extra_fields) - WRITABLE_ORDER_FIELDS
        if unknown:
            raise ValueError(f"Unknown order fields: {sorted(unknown)}")

        async with self._session_factory() as session:
            order_model = await session.get(OrderModel, order_id)
            if order_model is None:
                logger.warning(f"Order not found for status update: {order_id}")
                return False

            order_model.status = OrderStatus(status).value
            for name, value in extra_fields.items():
                setattr(order_model, name, value)

            await session.commit()
            logger.debug(f"Order {order_id} -> {order_model.status}")
            return True

    async def get_product_stock(self, product_id: str) -> Optional[ProductStock]:
        """Get product stock by ID."""
        async with self._session_factory() as session:
            product = await session.get(ProductModel, product_id)
            if product is None:
                return None
            return ProductStock(product_id=product.id, name=product.name, stock=product.stock)

    async def set_product_stock(self, product_id: str, new_stock: int) -> bool:
        """Overwrite product stock."""
        async with self._session_factory() as session:
            product = await session.get(ProductModel, product_id)
            if product is None:
                return False
            product.stock = new_stock
            await session.commit()
            return True

    async def list_orders_by_status(self, status: OrderStatus, limit: int) -> List[str]:
        """List ids of orders in ``status``, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderModel.id)
                .where(OrderModel.status == OrderStatus(status).value)
                .order_by(OrderModel.created_at.asc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def list_all_order_statuses(self) -> List[str]:
        """Return every order's status."""
        async with self._session_factory() as session:
            result = await session.execute(select(OrderModel.status))
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    async def save_order(self, order: Order) -> None:
        """
        Insert or replace an order with its lines.

        Args:
            order: Order entity to persist
        """
        async with self._session_factory() as session:
            existing = await session.get(
                OrderModel, order.id, options=[selectinload(OrderModel.lines)]
            )
            if existing is not None:
                await session.delete(existing)
                await session.flush()

            session.add(self._to_model(order))
            await session.commit()
            logger.info(f"✅ Saved order: {order.id}")

    async def save_product(self, product_id: str, name: str, stock: int) -> None:
        """Insert or update a product stock record."""
        async with self._session_factory() as session:
            product = await session.get(ProductModel, product_id)
            if product is None:
                session.add(ProductModel(id=product_id, name=name, stock=stock))
            else:
                product.name = name
                product.stock = stock
            await session.commit()

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _to_domain_entity(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            customer_name=model.customer_name or "",
            customer_email=model.customer_email or "",
            customer_phone=model.customer_phone,
            lines=[
                OrderLine(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in model.lines
            ],
            total=model.total,
            status=OrderStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
            validated_at=model.validated_at,
            cancelled_at=model.cancelled_at,
            cancellation_reason=model.cancellation_reason,
            stock_adjusted=model.stock_adjusted,
        )

    def _to_model(self, order: Order) -> OrderModel:
        model = OrderModel(
            id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            total=order.total,
            status=order.status.value,
            validated_at=order.validated_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            stock_adjusted=order.stock_adjusted,
        )
        if order.created_at is not None:
            model.created_at = order.created_at
        model.lines = [
            OrderLineModel(
                position=position,
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            for position, line in enumerate(order.lines)
        ]
        return model

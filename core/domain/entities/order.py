"""
Order aggregate.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- aiohttp

Orders are owned by the order store. The services only ever hold
per-operation snapshots of them.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..enums.order_status import OrderStatus


@dataclass
class OrderLine:
    """Individual product line within an order."""
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        if not isinstance(self.unit_price, Decimal):
            self.unit_price = Decimal(str(self.unit_price))

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Order:
    """
    Customer order snapshot.
    
    ``stock_adjusted`` is the processing ledger: it is set once inventory
    has been decremented for this order so a retry never decrements twice.
    """
    id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    lines: List[OrderLine] = field(default_factory=list)
    total: Decimal = Decimal("0")
    status: OrderStatus = OrderStatus.PENDING
    
    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    validated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    
    cancellation_reason: Optional[str] = None
    stock_adjusted: bool = False

    def __post_init__(self):
        if not isinstance(self.total, Decimal):
            self.total = Decimal(str(self.total))
        if not isinstance(self.status, OrderStatus):
            self.status = OrderStatus(self.status)

    def calculated_total(self) -> Decimal:
        """Sum of quantity x unit price over all lines."""
        return sum((line.subtotal for line in self.lines), Decimal("0"))


@dataclass(frozen=True)
class ProductStock:
    """Current stock level of a product."""
    product_id: str
    name: str
    stock: int

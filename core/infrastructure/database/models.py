"""
SQLAlchemy ORM Models.

Maps order store records to database tables.
"""
from sqlalchemy import (
    Column, String, DateTime, Integer, Numeric, Text, Boolean, Index, ForeignKey
)
from sqlalchemy.orm import declarative_base, relationship

from core.utils.datetime import utc_now


Base = declarative_base()


# =============================================================================
# ORDER MODEL
# =============================================================================

class OrderModel(Base):
    """
    Order database model.
    
    Stores customer details, lifecycle status and the stock ledger flag.
    """
    
    __tablename__ = "orders"
    
    id = Column(String(64), primary_key=True)
    
    # Customer
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(64), nullable=True)
    
    total = Column(Numeric(15, 2), nullable=False, default=0)
    
    # Lifecycle
    status = Column(String(20), nullable=False, default="pending", index=True)
    cancellation_reason = Column(Text, nullable=True)
    stock_adjusted = Column(Boolean, nullable=False, default=False)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
    validated_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    
    lines = relationship(
        "OrderLineModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.position",
    )
    
    __table_args__ = (
        Index("ix_orders_status_created_at", "status", "created_at"),
    )
    
    def __repr__(self):
        return f"<OrderModel(id={self.id}, status={self.status})>"


# =============================================================================
# ORDER LINE MODEL
# =============================================================================

class OrderLineModel(Base):
    """Order line database model."""
    
    __tablename__ = "order_lines"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(64), ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    
    product_id = Column(String(64), nullable=False, index=True)
    product_name = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    
    order = relationship("OrderModel", back_populates="lines")


# =============================================================================
# PRODUCT MODEL
# =============================================================================

class ProductModel(Base):
    """Product stock database model."""
    
    __tablename__ = "products"
    
    id = Column(String(64), primary_key=True)
    name = Column(String(500), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
    
    def __repr__(self):
        return f"<ProductModel(id={self.id}, stock={self.stock})>"

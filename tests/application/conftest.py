"""Shared fixtures for order processing tests."""

from decimal import Decimal

import pytest

from core.application.services.order_processor import OrderProcessorService
from core.application.services.order_validator import OrderValidatorService
from core.domain.entities.order import Order, OrderLine
from core.domain.enums.order_status import OrderStatus
from core.infrastructure.adapters.documents.plain_text_proof_renderer import PlainTextProofRenderer
from core.infrastructure.adapters.notifications.mock_notification_dispatcher import (
    MockNotificationDispatcher,
)
from core.infrastructure.adapters.persistence.in_memory_order_gateway import InMemoryOrderGateway


def make_order(
    order_id: str = "order-1",
    quantity: int = 2,
    unit_price: str = "50.00",
    total: str = "100.00",
    status: OrderStatus = OrderStatus.PENDING,
    **overrides,
) -> Order:
    """Build a valid single-line order for product ``p-1``."""
    values = dict(
        id=order_id,
        customer_name="Mona Adel",
        customer_email="mona@example.com",
        lines=[
            OrderLine(
                product_id="p-1",
                product_name="Desk Lamp",
                quantity=quantity,
                unit_price=Decimal(unit_price),
            )
        ],
        total=Decimal(total),
        status=status,
    )
    values.update(overrides)
    return Order(**values)


@pytest.fixture
def gateway() -> InMemoryOrderGateway:
    store = InMemoryOrderGateway()
    store.add_product("p-1", "Desk Lamp", 10)
    return store


@pytest.fixture
def notifier() -> MockNotificationDispatcher:
    return MockNotificationDispatcher()


@pytest.fixture
def validator(gateway) -> OrderValidatorService:
    return OrderValidatorService(gateway)


@pytest.fixture
def processor(gateway, validator, notifier) -> OrderProcessorService:
    return OrderProcessorService(
        gateway=gateway,
        validator=validator,
        renderer=PlainTextProofRenderer(gateway),
        notifier=notifier,
    )


@pytest.fixture
def order_factory():
    return make_order

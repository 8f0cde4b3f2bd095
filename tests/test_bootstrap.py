"""Tests for service wiring."""

from decimal import Decimal

import pytest

from core.bootstrap import build_notifier, build_order_services, build_workflow_services
from core.domain.entities.order import Order, OrderLine
from core.infrastructure.adapters.notifications.mock_notification_dispatcher import (
    MockNotificationDispatcher,
)
from core.infrastructure.adapters.notifications.webhook_notification_dispatcher import (
    WebhookNotificationDispatcher,
)
from core.infrastructure.adapters.persistence.in_memory_order_gateway import InMemoryOrderGateway
from core.infrastructure.database.repositories.sqlalchemy_order_gateway import SQLAlchemyOrderGateway
from core.settings import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    NotificationSettings,
    OrderProcessingSettings,
    WorkflowSettings,
)


def make_settings(database_url="sqlite+aiosqlite:///:memory:", webhook_url="", delay_ms=1000):
    return AppSettings(
        logging=LoggingSettings(LOG_LEVEL="WARNING"),
        orders=OrderProcessingSettings(ORDERS_BATCH_LIMIT=5),
        workflow=WorkflowSettings(WORKFLOW_DEFAULT_DELAY_MS=delay_ms),
        database=DatabaseSettings(DB_DATABASE_URL=database_url),
        notifications=NotificationSettings(NOTIFY_WEBHOOK_URL=webhook_url),
    )


def test_notifier_choice():
    assert isinstance(build_notifier(make_settings()), MockNotificationDispatcher)
    assert isinstance(
        build_notifier(make_settings(webhook_url="https://hooks.example.test")),
        WebhookNotificationDispatcher,
    )


@pytest.mark.asyncio
async def test_order_services_on_database(tmp_path):
    settings = make_settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")

    services = await build_order_services(settings)

    assert isinstance(services.gateway, SQLAlchemyOrderGateway)
    await services.gateway.save_product("p-1", "Lamp", 4)
    await services.gateway.save_order(
        Order(
            id="o-1",
            customer_name="Nour",
            customer_email="nour@example.com",
            lines=[OrderLine("p-1", "Lamp", 1, Decimal("20"))],
            total=Decimal("20"),
        )
    )

    summary = await services.batch_driver.run_scheduled_batch()

    assert summary.succeeded == 1
    assert (await services.gateway.get_product_stock("p-1")).stock == 3


@pytest.mark.asyncio
async def test_order_services_with_injected_gateway():
    gateway = InMemoryOrderGateway()

    services = await build_order_services(make_settings(), gateway=gateway)

    assert services.gateway is gateway
    assert services.scheduler.batch_trigger.interval_seconds == 300
    assert await services.batch_driver.process_pending_orders() == []


@pytest.mark.asyncio
async def test_workflow_services_use_settings():
    recorded: list[float] = []
    services = build_workflow_services(make_settings(delay_ms=0))
    await services.registry.create_workflow(
        {
            "id": "wf",
            "name": "wait",
            "nodes": [
                {"id": "s", "type": "start", "connections": {"next": "d"}},
                {"id": "d", "type": "delay", "connections": {"next": "e"}},
                {"id": "e", "type": "end"},
            ],
        }
    )

    async def on_finished(event):
        recorded.append(event.payload["status"])

    services.event_bus.subscribe("workflow.finished", on_finished)
    result = await services.interpreter.execute_workflow("wf")

    assert result.success
    assert recorded == ["completed"]

"""
End-to-End Demo: Order Lifecycle + Workflow

This demonstrates the complete flow:
1. Seed pending orders and stock
2. Run one batch (validate, render proof, notify, adjust stock, complete)
3. Cancel an order and print processing stats
4. Run a branching workflow through an endpoint trigger

Uses in-memory implementations (no database or webhook needed).
"""
import asyncio
from decimal import Decimal

from core.bootstrap import build_order_services, build_workflow_services
from core.domain.entities.order import Order, OrderLine
from core.infrastructure.adapters.notifications.mock_notification_dispatcher import (
    MockNotificationDispatcher,
)
from core.infrastructure.adapters.persistence.in_memory_order_gateway import InMemoryOrderGateway
from core.infrastructure.logging import get_logger
from orchestration.triggers import EndpointTrigger


logger = get_logger(__name__)


def seed_orders(gateway: InMemoryOrderGateway) -> None:
    gateway.add_product("LAMP-01", "Desk Lamp", 12)
    gateway.add_product("MUG-02", "Coffee Mug", 3)

    gateway.add_order(Order(
        id="ORD-1001",
        customer_name="Mona Adel",
        customer_email="mona@example.com",
        lines=[
            OrderLine("LAMP-01", "Desk Lamp", 2, Decimal("349.00")),
            OrderLine("MUG-02", "Coffee Mug", 1, Decimal("85.50")),
        ],
        total=Decimal("783.50"),
    ))
    gateway.add_order(Order(
        id="ORD-1002",
        customer_name="Karim Nabil",
        customer_email="karim-at-example",
        lines=[OrderLine("LAMP-01", "Desk Lamp", 1, Decimal("349.00"))],
        total=Decimal("349.00"),
    ))
    gateway.add_order(Order(
        id="ORD-1003",
        customer_name="Laila Samir",
        customer_email="laila@example.com",
        lines=[OrderLine("MUG-02", "Coffee Mug", 5, Decimal("85.50"))],
        total=Decimal("427.50"),
    ))


async def no_pause(seconds: float) -> None:
    return None


async def demo_orders() -> None:
    print("\n" + "=" * 80)
    print("DEMO: Order batch")
    print("=" * 80 + "\n")

    gateway = InMemoryOrderGateway()
    notifier = MockNotificationDispatcher()
    seed_orders(gateway)

    services = await build_order_services(gateway=gateway, notifier=notifier, sleeper=no_pause)

    for result in await services.batch_driver.process_pending_orders():
        marker = "✅" if result.success else "❌"
        print(f"{marker} {result.order_id}: {result.message}")
        for error in result.errors or []:
            print(f"     error: {error}")
        for warning in result.warnings or []:
            print(f"     warning: {warning}")

    print(f"\n📦 Desk Lamp stock: {gateway.stock_of('LAMP-01')}")
    print(f"📦 Coffee Mug stock: {gateway.stock_of('MUG-02')}")

    await services.processor.cancel_order("ORD-1003", "customer request")
    stats = await services.processor.get_processing_stats()
    print(f"\n📈 Stats: {stats.model_dump()}")
    print(f"🔔 Notifications sent: {len(notifier.get_notifications())}")


async def demo_workflow() -> None:
    print("\n" + "=" * 80)
    print("DEMO: Workflow endpoint")
    print("=" * 80 + "\n")

    services = build_workflow_services()
    await services.registry.load(
        workflows=[{
            "id": "route-order",
            "name": "Route order by amount",
            "variables": {"queue": "standard"},
            "nodes": [
                {"id": "start", "type": "start", "connections": {"next": "amount"}},
                {
                    "id": "amount",
                    "type": "transform",
                    "config": {"transform": {"amount": "$body.amount"}},
                    "connections": {"next": "check"},
                },
                {
                    "id": "check",
                    "type": "condition",
                    "config": {"condition": {"field": "amount", "operator": "greaterThan", "value": 500}},
                    "connections": {"onTrue": "priority", "onFalse": "end"},
                },
                {
                    "id": "priority",
                    "type": "transform",
                    "config": {"transform": {"queue": "priority"}},
                    "connections": {"next": "notify"},
                },
                {
                    "id": "notify",
                    "type": "notification",
                    "config": {"message": "Priority order received"},
                    "connections": {"next": "end"},
                },
                {"id": "end", "type": "end"},
            ],
        }],
        endpoints=[{
            "id": "orders-hook",
            "name": "Order hook",
            "path": "/hooks/orders",
            "handler": {"type": "workflow", "workflowId": "route-order"},
        }],
    )

    async def on_event(event) -> None:
        logger.info(f"event {event.name} {event.payload}")

    services.event_bus.subscribe("workflow.finished", on_event)

    trigger = EndpointTrigger(services.registry, services.interpreter)
    for amount in (120, 900):
        response = await trigger.invoke("orders-hook", body={"amount": amount})
        print(f"amount={amount} -> {response.status_code} queue={response.body['result']['queue']}")


async def main() -> None:
    await demo_orders()
    await demo_workflow()


if __name__ == "__main__":
    asyncio.run(main())

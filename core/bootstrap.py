"""
Service wiring.

Builds the order services and the workflow interpreter from AppSettings.
Callers own the returned objects; nothing here is a process-wide singleton.
"""
from dataclasses import dataclass
from typing import Optional
import asyncio
import logging

from core.application.interfaces import INotificationDispatcher
from core.application.services.batch_driver import BatchDriver, Sleeper
from core.application.services.order_processor import OrderProcessorService
from core.application.services.order_scheduler import OrderScheduler
from core.application.services.order_validator import OrderValidatorService
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.infrastructure.adapters.documents.plain_text_proof_renderer import PlainTextProofRenderer
from core.infrastructure.adapters.notifications.mock_notification_dispatcher import (
    MockNotificationDispatcher,
)
from core.infrastructure.adapters.notifications.webhook_notification_dispatcher import (
    WebhookNotificationDispatcher,
)
from core.infrastructure.database.config import create_engine, create_session_factory, init_database
from core.infrastructure.database.repositories.sqlalchemy_order_gateway import SQLAlchemyOrderGateway
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings, get_app_settings
from orchestration import InMemoryEventBus, InMemoryExecutionStore, InMemoryWorkflowRegistry
from orchestration.interpreter import WorkflowInterpreter


logger = logging.getLogger(__name__)


@dataclass
class OrderServices:
    gateway: OrderStoreGateway
    notifier: INotificationDispatcher
    validator: OrderValidatorService
    processor: OrderProcessorService
    batch_driver: BatchDriver
    scheduler: OrderScheduler


@dataclass
class WorkflowServices:
    registry: InMemoryWorkflowRegistry
    execution_store: InMemoryExecutionStore
    event_bus: InMemoryEventBus
    interpreter: WorkflowInterpreter


def build_notifier(settings: AppSettings) -> INotificationDispatcher:
    """Webhook dispatcher when a URL is configured, console mock otherwise."""
    if settings.notifications.enabled and settings.notifications.webhook_url:
        return WebhookNotificationDispatcher(settings.notifications)
    logger.info("No notification webhook configured, using console notifications")
    return MockNotificationDispatcher()


async def build_order_services(
    settings: Optional[AppSettings] = None,
    gateway: Optional[OrderStoreGateway] = None,
    notifier: Optional[INotificationDispatcher] = None,
    sleeper: Sleeper = asyncio.sleep,
) -> OrderServices:
    """
    Wire the order lifecycle services.

    Args:
        settings: Application settings (cached settings when omitted)
        gateway: Order store; a SQLAlchemy gateway on ``DB_DATABASE_URL`` when omitted
        notifier: Notification dispatcher; chosen from settings when omitted
        sleeper: Async sleep for the batch driver and scheduler

    Returns:
        OrderServices bundle
    """
    settings = settings or get_app_settings()
    configure_logging(settings.logging.level)

    if gateway is None:
        engine = create_engine(settings.database)
        await init_database(engine)
        gateway = SQLAlchemyOrderGateway(create_session_factory(engine))

    notifier = notifier or build_notifier(settings)
    validator = OrderValidatorService(gateway, settings.orders)
    processor = OrderProcessorService(
        gateway=gateway,
        validator=validator,
        renderer=PlainTextProofRenderer(gateway),
        notifier=notifier,
        settings=settings.orders,
    )
    batch_driver = BatchDriver(gateway, processor, settings.orders, sleeper)
    scheduler = OrderScheduler(batch_driver, processor, settings.orders, sleeper)

    logger.info("✅ Order services ready")
    return OrderServices(
        gateway=gateway,
        notifier=notifier,
        validator=validator,
        processor=processor,
        batch_driver=batch_driver,
        scheduler=scheduler,
    )


def build_workflow_services(
    settings: Optional[AppSettings] = None,
    registry: Optional[InMemoryWorkflowRegistry] = None,
) -> WorkflowServices:
    """Wire the workflow interpreter with in-memory registry, store and bus."""
    settings = settings or get_app_settings()
    registry = registry or InMemoryWorkflowRegistry()
    execution_store = InMemoryExecutionStore()
    event_bus = InMemoryEventBus()
    interpreter = WorkflowInterpreter(
        registry=registry,
        execution_store=execution_store,
        event_bus=event_bus,
        settings=settings.workflow,
    )
    return WorkflowServices(
        registry=registry,
        execution_store=execution_store,
        event_bus=event_bus,
        interpreter=interpreter,
    )

"""Batch driver - feeds pending orders to the processor one at a time."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import List, Optional

from core.application.dtos.processing_dto import BatchSummary, ProcessingResult
from core.application.services.order_processor import OrderProcessorService
from core.domain.enums.order_status import OrderStatus
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.settings.modules.order_settings import OrderProcessingSettings


logger = logging.getLogger(__name__)

# Injected so tests can drive batches without real delays
Sleeper = Callable[[float], Awaitable[None]]


class BatchDriver:
    """
    Pulls pending orders and processes them sequentially.

    Orders are never processed concurrently: a fixed pause between orders
    bounds the load on the renderer and the notification dispatcher.
    """

    def __init__(
        self,
        gateway: OrderStoreGateway,
        processor: OrderProcessorService,
        settings: Optional[OrderProcessingSettings] = None,
        sleeper: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize batch driver.

        Args:
            gateway: Order store gateway used to discover pending orders
            processor: Order processor
            settings: Batch limit and pause settings
            sleeper: Async sleep used between orders
        """
        self._gateway = gateway
        self._processor = processor
        self._settings = settings or OrderProcessingSettings()
        self._sleep = sleeper

    async def process_pending_orders(self) -> List[ProcessingResult]:
        """Process up to ``batch_limit`` pending orders.

        Returns:
            One ProcessingResult per attempted order, in processing order
        """
        try:
            order_ids = await self._gateway.list_orders_by_status(
                OrderStatus.PENDING, self._settings.batch_limit
            )
        except Exception as exc:
            logger.error(f"Error listing pending orders: {exc}", exc_info=True)
            return []

        # Never trust the store to honour the limit
        order_ids = list(order_ids)[: self._settings.batch_limit]
        if not order_ids:
            logger.info("📭 No pending orders to process")
            return []

        logger.info(f"📦 Processing {len(order_ids)} pending orders...")

        results: List[ProcessingResult] = []
        for index, order_id in enumerate(order_ids):
            if index > 0:
                await self._sleep(self._settings.inter_order_pause_seconds)
            results.append(await self._processor.process_order(order_id))

        summary = BatchSummary.from_results(results)
        logger.info(f"✅ Processed {summary.succeeded}/{summary.attempted} orders successfully")
        return results

    async def run_scheduled_batch(self) -> BatchSummary:
        """Entry point for the periodic trigger.

        Returns:
            Aggregate counts for the batch
        """
        results = await self.process_pending_orders()
        summary = BatchSummary.from_results(results)
        logger.info(
            f"🕐 [SCHEDULED] Processed {summary.succeeded}/{summary.attempted} orders "
            f"({summary.failed} failed)"
        )
        return summary

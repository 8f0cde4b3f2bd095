"""Periodic triggers for automatic order processing."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import List, Optional

from core.application.dtos.processing_dto import BatchSummary, ProcessingStats
from core.application.services.batch_driver import BatchDriver, Sleeper
from core.application.services.order_processor import OrderProcessorService
from core.settings.modules.order_settings import OrderProcessingSettings


logger = logging.getLogger(__name__)

TriggerHandler = Callable[[], Awaitable[object]]


class PeriodicTrigger:
    """Runs an async handler at a fixed cadence on the running event loop."""

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        handler: TriggerHandler,
        sleeper: Sleeper = asyncio.sleep,
    ) -> None:
        self.name = name
        self.interval_seconds = interval_seconds
        self._handler = handler
        self._sleep = sleeper
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> object:
        """Invoke the handler once. Handler errors are logged, not raised."""
        self.runs += 1
        try:
            return await self._handler()
        except Exception as exc:
            logger.error(f"❌ [{self.name}] trigger handler failed: {exc}", exc_info=True)
            return None

    def start(self) -> None:
        """Start firing every ``interval_seconds``. Must be called inside a running loop."""
        if self.is_running:
            logger.warning(f"Trigger {self.name} already running")
            return
        self._task = asyncio.create_task(self._loop(), name=f"trigger:{self.name}")
        logger.info(f"⏰ Trigger {self.name} started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the trigger and wait for the loop to exit."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info(f"Trigger {self.name} stopped")

    async def _loop(self) -> None:
        while True:
            await self._sleep(self.interval_seconds)
            await self.run_once()


class OrderScheduler:
    """
    Wires the automatic order jobs:

    - pending order processing every ``batch_interval_seconds``
    - processing stats report every ``stats_interval_seconds``
    """

    def __init__(
        self,
        batch_driver: BatchDriver,
        processor: OrderProcessorService,
        settings: Optional[OrderProcessingSettings] = None,
        sleeper: Sleeper = asyncio.sleep,
    ) -> None:
        self._batch_driver = batch_driver
        self._processor = processor
        settings = settings or OrderProcessingSettings()
        self.batch_trigger = PeriodicTrigger(
            "process_pending_orders",
            settings.batch_interval_seconds,
            self._run_batch,
            sleeper=sleeper,
        )
        self.stats_trigger = PeriodicTrigger(
            "processing_stats_report",
            settings.stats_interval_seconds,
            self._report_stats,
            sleeper=sleeper,
        )

    @property
    def triggers(self) -> List[PeriodicTrigger]:
        return [self.batch_trigger, self.stats_trigger]

    def start(self) -> None:
        for trigger in self.triggers:
            trigger.start()
        logger.info("⏰ Order scheduler initialized")

    async def stop(self) -> None:
        for trigger in self.triggers:
            await trigger.stop()

    async def _run_batch(self) -> BatchSummary:
        logger.info("🕐 [SCHEDULED] Running automatic order processing...")
        return await self._batch_driver.run_scheduled_batch()

    async def _report_stats(self) -> Optional[ProcessingStats]:
        stats = await self._processor.get_processing_stats()
        if stats is not None:
            logger.info(f"📈 [SCHEDULED] Order stats: {stats.model_dump()}")
        return stats

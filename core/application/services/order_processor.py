"""Order processing service - drives one order through its lifecycle."""

import logging
from collections import Counter
from typing import List, Optional

from core.application.dtos.processing_dto import ProcessingResult, ProcessingStats
from core.application.interfaces import IDocumentRenderer, INotificationDispatcher
from core.application.services.order_validator import OrderValidatorService
from core.application.services.processing_pipeline import (
    ProcessingRun,
    ProcessingStep,
    StepKind,
    run_pipeline,
)
from core.domain.enums.order_status import OrderStatus
from core.domain.exceptions import OrderProcessingError
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.settings.modules.order_settings import OrderProcessingSettings
from core.utils.datetime import utc_now


logger = logging.getLogger(__name__)


class OrderProcessorService:
    """
    Order lifecycle state machine.

    pending -> validated -> processing -> completed, with processing -> pending
    on failure so the order can be retried, and cancelled reachable from any
    state. Nothing here raises to the caller: every operation returns a result.
    """

    def __init__(
        self,
        gateway: OrderStoreGateway,
        validator: OrderValidatorService,
        renderer: IDocumentRenderer,
        notifier: INotificationDispatcher,
        settings: Optional[OrderProcessingSettings] = None,
    ) -> None:
        """Initialize order processor.

        Args:
            gateway: Order store gateway
            validator: Order validator
            renderer: Proof-of-purchase renderer
            notifier: Customer notification dispatcher
            settings: Order processing settings
        """
        self._gateway = gateway
        self._validator = validator
        self._renderer = renderer
        self._notifier = notifier
        self._settings = settings or OrderProcessingSettings()
        self._steps = self._build_pipeline()

    @property
    def steps(self) -> List[ProcessingStep]:
        return list(self._steps)

    async def process_order(self, order_id: str) -> ProcessingResult:
        """Process an order end to end.

        Args:
            order_id: Order ID

        Returns:
            ProcessingResult describing the outcome
        """
        logger.info(f"🔄 Processing order {order_id}...")

        try:
            order = await self._gateway.get_order(order_id)
        except Exception as exc:
            logger.error(f"Error loading order {order_id}: {exc}", exc_info=True)
            return ProcessingResult(
                success=False,
                order_id=order_id,
                message="Error loading order",
                errors=[str(exc)],
            )

        if order is None:
            return ProcessingResult(
                success=False,
                order_id=order_id,
                message="Order not found",
                errors=["Order not found"],
            )

        if order.status.is_terminal:
            logger.info(f"Order {order_id} is {order.status.value}, skipping")
            return ProcessingResult(
                success=False,
                order_id=order_id,
                message="Order is cancelled",
                errors=[f"Order {order_id} is cancelled and cannot be processed"],
            )

        if order.status is OrderStatus.COMPLETED:
            logger.info(f"Order {order_id} already completed, nothing to do")
            return ProcessingResult(
                success=True,
                order_id=order_id,
                message="Order already processed",
            )

        validation = await self._validator.validate_order(order_id)
        if not validation.is_valid:
            return ProcessingResult(
                success=False,
                order_id=order_id,
                message="Order is not valid",
                errors=validation.errors,
                warnings=validation.warnings,
            )

        run = ProcessingRun(order=order, warnings=list(validation.warnings))

        try:
            await run_pipeline(self._steps, run)
        except Exception as exc:
            logger.error(f"❌ Error processing order {order_id}: {exc}", exc_info=True)
            await self._rollback(order_id)
            return ProcessingResult(
                success=False,
                order_id=order_id,
                message="Error processing order",
                errors=[str(exc) or exc.__class__.__name__],
                warnings=run.warnings or None,
            )

        logger.info(f"✅ Order {order_id} completed")
        return ProcessingResult(
            success=True,
            order_id=order_id,
            message="Order processed successfully",
            warnings=run.warnings,
        )

    async def retry_order(self, order_id: str) -> ProcessingResult:
        """Retry a failed order. Identical to processing it again."""
        logger.info(f"🔄 Retrying order {order_id}...")
        return await self.process_order(order_id)

    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> bool:
        """Cancel an order from any state.

        Args:
            order_id: Order ID
            reason: Cancellation reason

        Returns:
            True if the cancellation was written
        """
        try:
            updated = await self._gateway.update_order_status(
                order_id,
                OrderStatus.CANCELLED,
                {
                    "cancelled_at": utc_now(),
                    "cancellation_reason": reason or self._settings.default_cancellation_reason,
                },
            )
        except Exception as exc:
            logger.error(f"Error cancelling order {order_id}: {exc}", exc_info=True)
            return False

        if not updated:
            logger.warning(f"Order {order_id} could not be cancelled")
            return False

        await self._notify_status(order_id, OrderStatus.CANCELLED)
        logger.info(f"❌ Order {order_id} cancelled")
        return True

    async def get_processing_stats(self) -> Optional[ProcessingStats]:
        """Count orders per status.

        Returns:
            ProcessingStats, or None if the store could not be read
        """
        try:
            statuses = await self._gateway.list_all_order_statuses()
        except Exception as exc:
            logger.error(f"Error getting stats: {exc}", exc_info=True)
            return None

        counts = Counter(str(getattr(s, "value", s)) for s in statuses)
        return ProcessingStats(
            total=len(statuses),
            by_status=dict(counts),
            **{status.value: counts.get(status.value, 0) for status in OrderStatus},
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _build_pipeline(self) -> List[ProcessingStep]:
        return [
            ProcessingStep("mark_validated", StepKind.REQUIRED, self._mark_validated),
            ProcessingStep("mark_processing", StepKind.REQUIRED, self._mark_processing),
            ProcessingStep("render_proof", StepKind.REQUIRED, self._render_proof),
            ProcessingStep("send_confirmation", StepKind.BEST_EFFORT, self._send_confirmation),
            ProcessingStep("adjust_inventory", StepKind.BEST_EFFORT, self._adjust_inventory),
            ProcessingStep("mark_completed", StepKind.REQUIRED, self._mark_completed),
            ProcessingStep("notify_completed", StepKind.BEST_EFFORT, self._notify_completed),
        ]

    async def _mark_validated(self, run: ProcessingRun) -> None:
        if not await self._validator.mark_validated(run.order.id):
            raise OrderProcessingError(run.order.id, "mark_validated", "Could not mark order as validated")

    async def _mark_processing(self, run: ProcessingRun) -> None:
        await self._write_status(run.order.id, OrderStatus.PROCESSING, "mark_processing")

    async def _render_proof(self, run: ProcessingRun) -> None:
        run.proof = await self._renderer.render_proof_of_purchase(run.order.id)
        logger.info(f"Proof of purchase rendered for order {run.order.id}")

    async def _send_confirmation(self, run: ProcessingRun) -> None:
        sent = await self._notifier.send_order_confirmation(run.order.id, attachment=run.proof)
        if not sent:
            logger.warning(f"⚠️ Confirmation for order {run.order.id} not delivered, continuing")
            run.warnings.append("Order confirmation could not be delivered")

    async def _adjust_inventory(self, run: ProcessingRun) -> None:
        order = run.order
        if order.stock_adjusted:
            logger.info(f"Stock already adjusted for order {order.id}, skipping decrement")
            return

        for line in order.lines:
            try:
                product = await self._gateway.get_product_stock(line.product_id)
                if product is None:
                    run.warnings.append(f"Product {line.product_name} not found while adjusting stock")
                    continue
                await self._gateway.set_product_stock(
                    line.product_id, max(0, product.stock - line.quantity)
                )
            except Exception as exc:
                logger.warning(f"Stock update failed for product {line.product_id}: {exc}")
                run.warnings.append(f"Stock for {line.product_name} was not updated")

        await self._gateway.update_order_status(
            order.id, OrderStatus.PROCESSING, {"stock_adjusted": True}
        )
        order.stock_adjusted = True

    async def _mark_completed(self, run: ProcessingRun) -> None:
        await self._write_status(run.order.id, OrderStatus.COMPLETED, "mark_completed")

    async def _notify_completed(self, run: ProcessingRun) -> None:
        await self._notify_status(run.order.id, OrderStatus.COMPLETED)

    async def _write_status(self, order_id: str, status: OrderStatus, step: str) -> None:
        if not await self._gateway.update_order_status(order_id, status):
            raise OrderProcessingError(order_id, step, f"Could not update order {order_id} to {status.value}")

    async def _notify_status(self, order_id: str, status: OrderStatus) -> None:
        try:
            sent = await self._notifier.send_status_update(order_id, status.value)
        except Exception as exc:
            logger.warning(f"Status notification for order {order_id} raised: {exc}")
            return
        if not sent:
            logger.warning(f"⚠️ Status notification ({status.value}) for order {order_id} not delivered")

    async def _rollback(self, order_id: str) -> None:
        try:
            await self._gateway.update_order_status(order_id, OrderStatus.PENDING)
        except Exception as exc:
            logger.error(f"Could not roll order {order_id} back to pending: {exc}", exc_info=True)

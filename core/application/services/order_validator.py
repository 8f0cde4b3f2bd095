"""Order validation service."""

import logging
import re
from decimal import Decimal
from typing import List, Optional, Tuple

from core.application.dtos.processing_dto import ValidationResult
from core.domain.entities.order import Order, OrderLine
from core.domain.enums.order_status import OrderStatus
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.settings.modules.order_settings import OrderProcessingSettings
from core.utils.datetime import utc_now


logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class OrderValidatorService:
    """
    Decides whether an order is fit to process.

    Validation is read-only. Every check runs (only a missing order
    short-circuits) so the caller sees all problems at once.
    """

    def __init__(
        self,
        gateway: OrderStoreGateway,
        settings: Optional[OrderProcessingSettings] = None,
    ) -> None:
        """Initialize validator.

        Args:
            gateway: Order store gateway
            settings: Tolerance and low-stock thresholds
        """
        self._gateway = gateway
        self._settings = settings or OrderProcessingSettings()

    async def validate_order(self, order_id: str) -> ValidationResult:
        """Validate an order.

        Args:
            order_id: Order ID

        Returns:
            ValidationResult with blocking errors and non-blocking warnings
        """
        errors: List[str] = []
        warnings: List[str] = []

        try:
            order = await self._gateway.get_order(order_id)
            if order is None:
                return ValidationResult.failure("Order not found")

            errors.extend(self._check_customer(order))
            errors.extend(self._check_lines(order.lines))

            if order.total <= 0:
                errors.append("Order total must be greater than 0")

            mismatch = self._check_total(order)
            if mismatch:
                warnings.append(mismatch)

            stock_errors, stock_warnings = await self._check_stock(order.lines)
            errors.extend(stock_errors)
            warnings.extend(stock_warnings)

        except Exception as exc:
            logger.error(f"Error validating order {order_id}: {exc}", exc_info=True)
            return ValidationResult.failure(f"Error validating order: {exc}", warnings)

        result = ValidationResult(errors=errors, warnings=warnings)
        if not result.is_valid:
            logger.info(f"Order {order_id} failed validation with {len(errors)} error(s)")
        return result

    async def mark_validated(self, order_id: str) -> bool:
        """Mark an order as validated without re-validating it.

        Args:
            order_id: Order ID

        Returns:
            True if the status write succeeded
        """
        try:
            return await self._gateway.update_order_status(
                order_id,
                OrderStatus.VALIDATED,
                {"validated_at": utc_now()},
            )
        except Exception as exc:
            logger.error(f"Error marking order {order_id} as validated: {exc}", exc_info=True)
            return False

    def _check_customer(self, order: Order) -> List[str]:
        errors = []
        if not order.customer_name or not order.customer_name.strip():
            errors.append("Customer name is required")
        if not order.customer_email or not EMAIL_PATTERN.match(order.customer_email):
            errors.append("Customer email is invalid")
        return errors

    def _check_lines(self, lines: List[OrderLine]) -> List[str]:
        if not lines:
            return ["Order must contain at least one product"]

        errors = []
        for line in lines:
            if line.quantity <= 0:
                errors.append(f"Invalid quantity for product {line.product_name}")
            if line.unit_price <= 0:
                errors.append(f"Invalid price for product {line.product_name}")
        return errors

    def _check_total(self, order: Order) -> Optional[str]:
        calculated = order.calculated_total()
        tolerance = Decimal(str(self._settings.total_tolerance))
        if abs(calculated - order.total) > tolerance:
            return (
                f"Calculated total ({calculated}) does not match "
                f"order total ({order.total})"
            )
        return None

    async def _check_stock(self, lines: List[OrderLine]) -> Tuple[List[str], List[str]]:
        errors: List[str] = []
        warnings: List[str] = []
        low_stock_factor = self._settings.low_stock_factor

        for line in lines:
            product = await self._gateway.get_product_stock(line.product_id)
            if product is None:
                errors.append(f"Product {line.product_name} not found")
                continue

            if product.stock < line.quantity:
                errors.append(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {product.stock}, requested: {line.quantity}"
                )
            elif product.stock < line.quantity * low_stock_factor:
                warnings.append(f"Stock is low for {product.name}")

        return errors, warnings

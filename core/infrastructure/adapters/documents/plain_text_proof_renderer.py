"""
Plain-text proof-of-purchase renderer.

Produces a UTF-8 receipt from the stored order. Useful for demos and as
a stand-in until a PDF renderer is plugged in.
"""
import logging

from core.application.interfaces import IDocumentRenderer
from core.domain.exceptions import OrderNotFoundError
from core.domain.repositories.order_gateway import OrderStoreGateway
from core.utils.datetime import utc_now


logger = logging.getLogger(__name__)


class PlainTextProofRenderer(IDocumentRenderer):
    """Renders a text receipt for an order."""

    def __init__(self, gateway: OrderStoreGateway, store_name: str = "Order Receipt"):
        self._gateway = gateway
        self._store_name = store_name

    async def render_proof_of_purchase(self, order_id: str) -> bytes:
        """
        Render receipt bytes.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = await self._gateway.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id, "render_proof")

        rows = [
            self._store_name,
            f"Order: {order.id}",
            f"Customer: {order.customer_name} <{order.customer_email}>",
            f"Issued: {utc_now().isoformat()}",
            "",
        ]
        for line in order.lines:
            rows.append(
                f"{line.quantity} x {line.product_name} @ {line.unit_price} = {line.subtotal}"
            )
        rows.extend(["", f"TOTAL: {order.total}"])

        logger.debug(f"Rendered proof of purchase for order {order_id}")
        return "\n".join(rows).encode("utf-8")

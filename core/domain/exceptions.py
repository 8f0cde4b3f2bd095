"""Domain exceptions for order processing."""


class OrderProcessingError(Exception):
    """A required processing step failed; the order is safe to retry."""

    def __init__(self, order_id: str, step: str, message: str):
        self.order_id = order_id
        self.step = step
        super().__init__(message)


class OrderNotFoundError(OrderProcessingError):
    """Order vanished from the store while being processed."""

    def __init__(self, order_id: str, step: str):
        super().__init__(order_id, step, f"Order {order_id} not found")

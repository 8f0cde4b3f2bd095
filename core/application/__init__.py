"""Application layer - services, interfaces, and DTOs."""

from .dtos import BatchSummary, ProcessingResult, ProcessingStats, ValidationResult
from .interfaces import IDocumentRenderer, INotificationDispatcher
from .services import (
    BatchDriver,
    OrderProcessorService,
    OrderScheduler,
    OrderValidatorService,
    PeriodicTrigger,
)

__all__ = [
    # DTOs
    "BatchSummary",
    "ProcessingResult",
    "ProcessingStats",
    "ValidationResult",
    # Services
    "BatchDriver",
    "OrderProcessorService",
    "OrderScheduler",
    "OrderValidatorService",
    "PeriodicTrigger",
    # Interfaces
    "IDocumentRenderer",
    "INotificationDispatcher",
]

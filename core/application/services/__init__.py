"""Application services."""
from .batch_driver import BatchDriver
from .order_processor import OrderProcessorService
from .order_scheduler import OrderScheduler, PeriodicTrigger
from .order_validator import OrderValidatorService
from .processing_pipeline import ProcessingRun, ProcessingStep, StepKind

__all__ = [
    "BatchDriver",
    "OrderProcessorService",
    "OrderScheduler",
    "OrderValidatorService",
    "PeriodicTrigger",
    "ProcessingRun",
    "ProcessingStep",
    "StepKind",
]

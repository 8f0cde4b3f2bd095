"""Application DTOs."""

from .processing_dto import BatchSummary, ProcessingResult, ProcessingStats, ValidationResult

__all__ = [
    "BatchSummary",
    "ProcessingResult",
    "ProcessingStats",
    "ValidationResult",
]

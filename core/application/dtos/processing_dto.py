"""Application DTOs for order validation and processing results."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class ValidationResult(BaseModel):
    """Outcome of validating one order. Errors block, warnings do not."""

    errors: List[str] = Field(default_factory=list, description="Blocking problems")
    warnings: List[str] = Field(default_factory=list, description="Non-blocking problems")

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def failure(cls, message: str, warnings: Optional[List[str]] = None) -> "ValidationResult":
        return cls(errors=[message], warnings=list(warnings or []))


class ProcessingResult(BaseModel):
    """Result returned for every order processing attempt."""

    success: bool = Field(..., description="Whether the order reached completed")
    order_id: str = Field(..., description="Order ID")
    message: str = Field(..., description="Human readable summary")
    errors: Optional[List[str]] = Field(None, description="Blocking errors")
    warnings: Optional[List[str]] = Field(None, description="Non-blocking warnings")

    model_config = {"frozen": True}


class ProcessingStats(BaseModel):
    """Order counts per lifecycle status."""

    total: int = Field(..., ge=0, description="Total order count")
    by_status: Dict[str, int] = Field(default_factory=dict, description="Count per status")
    pending: int = Field(default=0, ge=0)
    validated: int = Field(default=0, ge=0)
    processing: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    cancelled: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class BatchSummary(BaseModel):
    """Aggregate counts for one batch run."""

    attempted: int = Field(..., ge=0)
    succeeded: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @classmethod
    def from_results(cls, results: List[ProcessingResult]) -> "BatchSummary":
        succeeded = sum(1 for r in results if r.success)
        return cls(attempted=len(results), succeeded=succeeded, failed=len(results) - succeeded)

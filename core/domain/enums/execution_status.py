"""
Execution Status Enum.

Status values recorded for workflow executions.
"""
from enum import Enum


class ExecutionStatus(str, Enum):
    """Execution status values."""
    
    COMPLETED = "completed"
    FAILED = "failed"

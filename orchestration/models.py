"""Orchestration models - ExecutionContext, WorkflowOutcome, ExecutionRecord, ExecutionResult."""

import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.domain.enums.execution_status import ExecutionStatus

logger = logging.getLogger(__name__)

# Mutable key/value state threaded through one execution
ExecutionContext = Dict[str, Any]


def snapshot_context(context: ExecutionContext) -> ExecutionContext:
    """Copy a context without ever failing.

    Values that cannot be deep-copied (locks, open clients) are shared
    by reference; everything else is copied.
    """
    try:
        return deepcopy(context)
    except Exception as exc:
        logger.debug(f"Context is not deep-copyable as a whole: {exc}")

    snapshot: ExecutionContext = {}
    for key, value in context.items():
        try:
            snapshot[key] = deepcopy(value)
        except Exception:
            logger.debug(f"Context value {key!r} is not copyable, keeping a reference")
            snapshot[key] = value
    return snapshot


class OutcomeKind(str, Enum):
    """How a traversal ended."""

    COMPLETED = "completed"  # reached an end node
    TRUNCATED = "truncated"  # ran out of successors before an end node


@dataclass(frozen=True)
class WorkflowOutcome:
    """Where and how a traversal stopped."""

    kind: OutcomeKind
    node_id: str
    missing_target: Optional[str] = None

    @classmethod
    def completed(cls, node_id: str) -> "WorkflowOutcome":
        return cls(kind=OutcomeKind.COMPLETED, node_id=node_id)

    @classmethod
    def truncated_at(cls, node_id: str, missing_target: Optional[str] = None) -> "WorkflowOutcome":
        return cls(kind=OutcomeKind.TRUNCATED, node_id=node_id, missing_target=missing_target)

    @property
    def is_truncated(self) -> bool:
        return self.kind is OutcomeKind.TRUNCATED


@dataclass(frozen=True)
class ExecutionRecord:
    """Stored record of one workflow execution."""

    execution_id: str
    workflow_id: str
    status: ExecutionStatus
    context: ExecutionContext
    executed_at: datetime
    error: Optional[str] = None
    outcome: Optional[WorkflowOutcome] = None

    def detached(self) -> "ExecutionRecord":
        """Same record with its own copy of the context."""
        return replace(self, context=snapshot_context(self.context))


@dataclass
class ExecutionResult:
    """Result returned by execute_workflow."""

    success: bool
    execution_id: str
    result: Optional[ExecutionContext] = None
    error: Optional[str] = None
    outcome: Optional[WorkflowOutcome] = None

"""Interpreter lifecycle events."""

from dataclasses import dataclass, field
from datetime import datetime

from core.utils.datetime import utc_now

WORKFLOW_STARTED = "workflow.started"
NODE_EXECUTED = "workflow.node.executed"
WORKFLOW_FINISHED = "workflow.finished"


@dataclass
class EventMetadata:
    """Which execution an event belongs to."""

    execution_id: str
    workflow_id: str
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class Event:
    """Lifecycle event emitted by the workflow interpreter."""

    name: str
    payload: dict[str, object]
    metadata: EventMetadata

    @classmethod
    def for_execution(
        cls, name: str, execution_id: str, workflow_id: str, payload: dict[str, object]
    ) -> "Event":
        return cls(
            name=name,
            payload=payload,
            metadata=EventMetadata(execution_id=execution_id, workflow_id=workflow_id),
        )

"""Orchestration layer - workflow graph interpreter with eventing."""

from typing import Optional

from core.settings.modules.workflow_settings import WorkflowSettings

from .bus import EventBusProtocol, InMemoryEventBus
from .collaborators import (
    ActionExecutor,
    ApiCaller,
    HttpApiCaller,
    LoggingMessageSender,
    MappingTransformer,
    MessageSender,
    RegistryActionExecutor,
    Transformer,
)
from .definitions import (
    EndpointAuthentication,
    EndpointDefinition,
    EndpointHandler,
    FormDefinition,
    FormSubmitAction,
    NodeConnections,
    NodeType,
    WorkflowDefinition,
    WorkflowNode,
    WorkflowTrigger,
)
from .events import Event, EventMetadata
from .exceptions import (
    ApiCallError,
    MissingStartNodeError,
    NodeVisitLimitExceeded,
    WorkflowExecutionError,
    WorkflowNodeError,
)
from .interpreter import WorkflowInterpreter
from .models import (
    ExecutionContext,
    ExecutionRecord,
    ExecutionResult,
    OutcomeKind,
    WorkflowOutcome,
)
from .registry import (
    ExecutionStore,
    InMemoryExecutionStore,
    InMemoryWorkflowRegistry,
    WorkflowRegistry,
)
from .triggers import EndpointResponse, EndpointTrigger, FormSubmissionResult, FormSubmissionTrigger

__all__ = [
    "ActionExecutor",
    "ApiCallError",
    "ApiCaller",
    "EndpointAuthentication",
    "EndpointDefinition",
    "EndpointHandler",
    "EndpointResponse",
    "EndpointTrigger",
    "Event",
    "EventBusProtocol",
    "EventMetadata",
    "ExecutionContext",
    "ExecutionRecord",
    "ExecutionResult",
    "ExecutionStore",
    "FormDefinition",
    "FormSubmissionResult",
    "FormSubmissionTrigger",
    "FormSubmitAction",
    "HttpApiCaller",
    "InMemoryEventBus",
    "InMemoryExecutionStore",
    "InMemoryWorkflowRegistry",
    "LoggingMessageSender",
    "MappingTransformer",
    "MessageSender",
    "MissingStartNodeError",
    "NodeConnections",
    "NodeType",
    "NodeVisitLimitExceeded",
    "OutcomeKind",
    "RegistryActionExecutor",
    "Transformer",
    "WorkflowDefinition",
    "WorkflowExecutionError",
    "WorkflowInterpreter",
    "WorkflowNode",
    "WorkflowNodeError",
    "WorkflowOutcome",
    "WorkflowRegistry",
    "WorkflowTrigger",
    "create_default_interpreter",
]


def create_default_interpreter(
    registry: WorkflowRegistry,
    execution_store: Optional[ExecutionStore] = None,
    settings: Optional[WorkflowSettings] = None,
) -> WorkflowInterpreter:
    """Create an interpreter with in-memory event bus and default collaborators.

    Args:
        registry: WorkflowRegistry instance
        execution_store: Optional store, in-memory when omitted
        settings: Optional workflow settings

    Returns:
        WorkflowInterpreter instance
    """
    return WorkflowInterpreter(
        registry=registry,
        execution_store=execution_store or InMemoryExecutionStore(),
        event_bus=InMemoryEventBus(),
        settings=settings,
    )

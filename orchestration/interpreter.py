"""Workflow interpreter - walks a workflow graph against a mutable context."""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from core.domain.enums.execution_status import ExecutionStatus
from core.domain.value_objects import ExecutionID
from core.settings.modules.workflow_settings import WorkflowSettings
from core.utils.datetime import utc_now

from .bus import EventBusProtocol
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
from .definitions import NodeType, WorkflowDefinition
from .events import NODE_EXECUTED, WORKFLOW_FINISHED, WORKFLOW_STARTED, Event
from .exceptions import MissingStartNodeError, NodeVisitLimitExceeded
from .models import (
    ExecutionContext,
    ExecutionRecord,
    ExecutionResult,
    WorkflowOutcome,
    snapshot_context,
)
from .nodes import DEFAULT_HANDLERS, NodeHandler, NodeServices, Sleeper, check_exhaustive
from .registry import ExecutionStore, WorkflowRegistry

logger = logging.getLogger(__name__)


class WorkflowInterpreter:
    """Executes registered workflow definitions.

    Every execution owns a fresh context seeded from the definition's
    variables overlaid with the caller's input. Failures never propagate:
    they are stored as failed execution records and reported in the result.
    """

    def __init__(
        self,
        registry: WorkflowRegistry,
        execution_store: ExecutionStore,
        event_bus: Optional[EventBusProtocol] = None,
        action_executor: Optional[ActionExecutor] = None,
        api_caller: Optional[ApiCaller] = None,
        transformer: Optional[Transformer] = None,
        message_sender: Optional[MessageSender] = None,
        settings: Optional[WorkflowSettings] = None,
        sleeper: Sleeper = asyncio.sleep,
        handlers: Optional[Mapping[NodeType, NodeHandler]] = None,
    ) -> None:
        """Initialize interpreter.

        Args:
            registry: Source of workflow definitions
            execution_store: Where execution records are kept
            event_bus: Optional bus for lifecycle events
            action_executor: Runs ``action`` nodes (default: empty registry)
            api_caller: Runs ``api_call`` nodes (default: aiohttp caller)
            transformer: Runs ``transform`` nodes (default: mapping transformer)
            message_sender: Runs ``email``/``notification`` nodes (default: logging sender)
            settings: Workflow settings
            sleeper: Async sleep used by ``delay`` nodes
            handlers: Override of the node handler table

        Raises:
            RuntimeError: If the handler table does not cover every NodeType
        """
        self._settings = settings or WorkflowSettings()
        self._handlers: Dict[NodeType, NodeHandler] = dict(handlers or DEFAULT_HANDLERS)
        check_exhaustive(self._handlers)

        self._registry = registry
        self._execution_store = execution_store
        self._event_bus = event_bus
        self._services = NodeServices(
            action_executor=action_executor or RegistryActionExecutor(),
            api_caller=api_caller or HttpApiCaller(self._settings.api_timeout_seconds),
            transformer=transformer or MappingTransformer(),
            message_sender=message_sender or LoggingMessageSender(),
            sleep=sleeper,
            default_delay_ms=self._settings.default_delay_ms,
        )

    async def execute_workflow(
        self, workflow_id: str, input_data: Optional[Mapping[str, Any]] = None
    ) -> ExecutionResult:
        """Run a workflow once.

        Args:
            workflow_id: Registered workflow id
            input_data: Caller input, wins over workflow variables on key conflicts

        Returns:
            ExecutionResult; ``success`` is False for unknown workflows, registry
            lookup failures and failed executions
        """
        try:
            workflow = await self._registry.get_workflow(workflow_id)
        except Exception as exc:
            logger.error(f"❌ Could not load workflow {workflow_id}: {exc}", exc_info=True)
            return ExecutionResult(success=False, execution_id="", error=str(exc))

        if workflow is None:
            logger.warning(f"❌ Workflow not found: {workflow_id}")
            return ExecutionResult(success=False, execution_id="", error="Workflow not found")

        execution_id = ExecutionID.generate("exec").value
        context: ExecutionContext = snapshot_context(workflow.variables)
        context.update(snapshot_context(dict(input_data or {})))

        logger.info(f"▶️ Executing workflow {workflow_id} ({workflow.name}) as {execution_id}")
        await self._publish(
            WORKFLOW_STARTED, execution_id, workflow_id, {"node_count": len(workflow.nodes)}
        )

        try:
            outcome = await self._walk(workflow, context, execution_id)
        except Exception as exc:
            logger.error(f"❌ Workflow {workflow_id} execution {execution_id} failed: {exc}")
            await self._record(
                ExecutionRecord(
                    execution_id=execution_id,
                    workflow_id=workflow_id,
                    status=ExecutionStatus.FAILED,
                    context=snapshot_context(context),
                    executed_at=utc_now(),
                    error=str(exc),
                )
            )
            await self._publish(
                WORKFLOW_FINISHED,
                execution_id,
                workflow_id,
                {"status": ExecutionStatus.FAILED.value, "error": str(exc)},
            )
            return ExecutionResult(success=False, execution_id=execution_id, error=str(exc))

        if outcome.is_truncated:
            logger.warning(
                f"⚠️ Workflow {workflow_id} stopped at node {outcome.node_id} "
                f"without reaching an end node (missing target: {outcome.missing_target})"
            )

        await self._record(
            ExecutionRecord(
                execution_id=execution_id,
                workflow_id=workflow_id,
                status=ExecutionStatus.COMPLETED,
                context=snapshot_context(context),
                executed_at=utc_now(),
                outcome=outcome,
            )
        )
        await self._publish(
            WORKFLOW_FINISHED,
            execution_id,
            workflow_id,
            {
                "status": ExecutionStatus.COMPLETED.value,
                "outcome": outcome.kind.value,
                "node_id": outcome.node_id,
            },
        )
        logger.info(f"✅ Workflow {workflow_id} execution {execution_id} {outcome.kind.value}")
        return ExecutionResult(
            success=True, execution_id=execution_id, result=context, outcome=outcome
        )

    async def get_execution(self, execution_id: str) -> Optional[ExecutionRecord]:
        return await self._execution_store.get(execution_id)

    async def _record(self, record: ExecutionRecord) -> None:
        try:
            await self._execution_store.save(record)
        except Exception as exc:
            logger.error(
                f"❌ Could not store execution {record.execution_id}: {exc}", exc_info=True
            )

    async def _walk(
        self, workflow: WorkflowDefinition, context: ExecutionContext, execution_id: str
    ) -> WorkflowOutcome:
        starts = workflow.start_nodes()
        if len(starts) != 1:
            raise MissingStartNodeError(workflow.id, len(starts))

        index = workflow.node_index()
        node = starts[0]
        limit = self._settings.max_node_visits
        visits = 0

        while True:
            visits += 1
            if visits > limit:
                raise NodeVisitLimitExceeded(workflow.id, limit, node.id)

            step = await self._handlers[node.type](node, context, self._services)
            await self._publish(
                NODE_EXECUTED,
                execution_id,
                workflow.id,
                {"node_id": node.id, "node_type": node.type.value, "next": step.next_id},
            )

            if step.terminal:
                return WorkflowOutcome.completed(node.id)
            if step.next_id is None:
                return WorkflowOutcome.truncated_at(node.id)

            successor = index.get(step.next_id)
            if successor is None:
                return WorkflowOutcome.truncated_at(node.id, missing_target=step.next_id)
            node = successor

    async def _publish(
        self, name: str, execution_id: str, workflow_id: str, payload: dict[str, object]
    ) -> None:
        if self._event_bus is None:
            return
        try:
            await self._event_bus.publish(
                Event.for_execution(name, execution_id, workflow_id, payload)
            )
        except Exception as exc:
            logger.error(f"❌ Could not publish {name} for {execution_id}: {exc}")

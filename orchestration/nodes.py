"""Node handlers - one per NodeType."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Dict, Optional

from .collaborators import ActionExecutor, ApiCaller, MessageSender, Transformer
from .conditions import evaluate_condition
from .definitions import NodeType, WorkflowNode
from .exceptions import WorkflowNodeError
from .models import ExecutionContext

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class NodeServices:
    """Collaborators available to node handlers during one execution."""

    action_executor: ActionExecutor
    api_caller: ApiCaller
    transformer: Transformer
    message_sender: MessageSender
    sleep: Sleeper
    default_delay_ms: int = 1000


@dataclass(frozen=True)
class NodeStep:
    """What to do after a node ran: follow ``next_id``, or stop."""

    next_id: Optional[str] = None
    terminal: bool = False


NodeHandler = Callable[[WorkflowNode, ExecutionContext, NodeServices], Awaitable[NodeStep]]


def _merge(node: WorkflowNode, context: ExecutionContext, produced: object) -> None:
    if produced is None:
        return
    if not isinstance(produced, Mapping):
        raise WorkflowNodeError(
            node.id, f"{node.type.value} produced {type(produced).__name__}, expected a mapping"
        )
    context.update(produced)


async def handle_start(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    return NodeStep(next_id=node.connections.next)


async def handle_end(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    return NodeStep(terminal=True)


async def handle_action(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    action = node.config.get("action")
    if action:
        # Result does not influence control flow
        await services.action_executor.execute(action, context)
    return NodeStep(next_id=node.connections.next)


async def handle_condition(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    passed = evaluate_condition(node.config.get("condition"), context)
    branch = node.connections.on_true if passed else node.connections.on_false
    logger.debug(f"Condition {node.id} -> {passed} (next: {branch})")
    return NodeStep(next_id=branch)


async def handle_api_call(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    endpoint = node.config.get("endpoint")
    if endpoint:
        response = await services.api_caller.call(endpoint, context, node.config)
        _merge(node, context, response)
    return NodeStep(next_id=node.connections.next)


async def handle_delay(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    """Sleep for ``config.delay`` milliseconds without blocking the loop.

    Only an absent delay falls back to the default; an explicit 0 means no
    wait rather than the default, and negative values clamp to 0.
    """
    delay_ms = node.config.get("delay")
    if delay_ms is None:
        delay_ms = services.default_delay_ms
    try:
        seconds = max(0.0, float(delay_ms) / 1000)
    except (TypeError, ValueError):
        raise WorkflowNodeError(node.id, f"invalid delay {delay_ms!r}")
    await services.sleep(seconds)
    return NodeStep(next_id=node.connections.next)


async def handle_transform(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    spec = node.config.get("transform")
    if spec:
        _merge(node, context, await services.transformer.transform(spec, context))
    return NodeStep(next_id=node.connections.next)


async def handle_message(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    sent = await services.message_sender.send(node.type.value, node.config, context)
    if not sent:
        logger.warning(f"⚠️ {node.type.value} node {node.id} message not delivered, continuing")
    return NodeStep(next_id=node.connections.next)


async def handle_unknown(node: WorkflowNode, context: ExecutionContext, services: NodeServices) -> NodeStep:
    logger.warning(f"Node {node.id} has unrecognised type {node.raw_type!r}, passing through")
    return NodeStep(next_id=node.connections.next)


DEFAULT_HANDLERS: Dict[NodeType, NodeHandler] = {
    NodeType.START: handle_start,
    NodeType.END: handle_end,
    NodeType.ACTION: handle_action,
    NodeType.CONDITION: handle_condition,
    NodeType.API_CALL: handle_api_call,
    NodeType.EMAIL: handle_message,
    NodeType.NOTIFICATION: handle_message,
    NodeType.DELAY: handle_delay,
    NodeType.TRANSFORM: handle_transform,
    NodeType.UNKNOWN: handle_unknown,
}


def check_exhaustive(handlers: Mapping[NodeType, NodeHandler]) -> None:
    """Raise if any NodeType lacks a handler."""
    missing = [t.value for t in NodeType if t not in handlers]
    if missing:
        raise RuntimeError(f"No handler for node types: {', '.join(missing)}")

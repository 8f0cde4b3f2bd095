"""Tests for WorkflowInterpreter."""

import asyncio
import threading
import time

import pytest

from core.domain.enums.execution_status import ExecutionStatus
from core.settings.modules.workflow_settings import WorkflowSettings
from orchestration.collaborators import LoggingMessageSender, RegistryActionExecutor
from orchestration.definitions import NodeType
from orchestration.interpreter import WorkflowInterpreter
from orchestration.models import OutcomeKind
from orchestration.nodes import DEFAULT_HANDLERS
from orchestration.registry import InMemoryWorkflowRegistry


class FakeApiCaller:
    """Returns a canned response and records calls."""

    def __init__(self, response) -> None:
        self.response = response
        self.calls: list[tuple] = []

    async def call(self, endpoint, context, config):
        self.calls.append((endpoint, dict(context)))
        return self.response


def node(node_id, node_type, next_id=None, **config):
    return {
        "id": node_id,
        "type": node_type,
        "config": config,
        "connections": {"next": next_id} if next_id else {},
    }


def condition_node(node_id, field, operator, value, on_true=None, on_false=None):
    return {
        "id": node_id,
        "type": "condition",
        "config": {"condition": {"field": field, "operator": operator, "value": value}},
        "connections": {"onTrue": on_true, "onFalse": on_false},
    }


def branching_workflow():
    return {
        "id": "wf-branch",
        "name": "Route big orders",
        "variables": {"route": None, "threshold": 100},
        "nodes": [
            node("start", "start", "check"),
            condition_node("check", "amount", "greaterThan", 100, on_true="a", on_false="b"),
            node("a", "transform", "end", transform={"route": "A"}),
            node("b", "transform", "end", transform={"route": "B"}),
            node("end", "end"),
        ],
    }


def make_interpreter(registry, store, bus=None, sleeper=None, **kwargs) -> WorkflowInterpreter:
    return WorkflowInterpreter(
        registry=registry,
        execution_store=store,
        event_bus=bus,
        sleeper=sleeper or asyncio.sleep,
        **kwargs,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("amount, route", [(150, "A"), (50, "B")])
async def test_condition_selects_branch(registry, store, amount, route):
    await registry.create_workflow(branching_workflow())
    interpreter = make_interpreter(registry, store)

    result = await interpreter.execute_workflow("wf-branch", {"amount": amount})

    assert result.success
    assert result.result["route"] == route
    assert result.result["amount"] == amount
    assert result.outcome.kind is OutcomeKind.COMPLETED
    assert result.outcome.node_id == "end"

    record = await interpreter.get_execution(result.execution_id)
    assert record.status == ExecutionStatus.COMPLETED
    assert record.context["route"] == route
    assert record.error is None


@pytest.mark.asyncio
async def test_unknown_workflow_creates_no_record(registry, store):
    interpreter = make_interpreter(registry, store)

    result = await interpreter.execute_workflow("missing")

    assert result.success is False
    assert result.execution_id == ""
    assert result.error == "Workflow not found"
    assert len(store) == 0


@pytest.mark.asyncio
async def test_input_overrides_variables_and_is_isolated(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-vars",
            "name": "vars",
            "variables": {"items": [], "mode": "default"},
            "nodes": [node("start", "start", "end"), node("end", "end")],
        }
    )
    interpreter = make_interpreter(registry, store)

    first = await interpreter.execute_workflow("wf-vars", {"mode": "custom"})
    first.result["items"].append("leak")
    second = await interpreter.execute_workflow("wf-vars")

    assert first.result["mode"] == "custom"
    assert second.result == {"items": [], "mode": "default"}
    assert first.execution_id != second.execution_id


@pytest.mark.asyncio
async def test_dangling_branch_is_truncated(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-dangling",
            "name": "dangling",
            "nodes": [
                node("start", "start", "check"),
                condition_node("check", "ok", "equals", True, on_true="ghost", on_false="end"),
                node("end", "end"),
            ],
        }
    )
    interpreter = make_interpreter(registry, store)

    result = await interpreter.execute_workflow("wf-dangling", {"ok": True})

    assert result.success
    assert result.result == {"ok": True}
    assert result.outcome.is_truncated
    assert result.outcome.node_id == "check"
    assert result.outcome.missing_target == "ghost"
    record = await interpreter.get_execution(result.execution_id)
    assert record.status == ExecutionStatus.COMPLETED
    assert record.outcome == result.outcome


@pytest.mark.asyncio
async def test_node_without_successor_is_truncated(registry, store):
    await registry.create_workflow(
        {"id": "wf-short", "name": "short", "nodes": [node("start", "start")]}
    )

    result = await make_interpreter(registry, store).execute_workflow("wf-short")

    assert result.success
    assert result.outcome.kind is OutcomeKind.TRUNCATED
    assert result.outcome.node_id == "start"
    assert result.outcome.missing_target is None


@pytest.mark.asyncio
async def test_delay_does_not_block_event_loop(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-delay",
            "name": "delay",
            "nodes": [
                node("start", "start", "wait"),
                node("wait", "delay", "end", delay=500),
                node("end", "end"),
            ],
        }
    )
    interpreter = make_interpreter(registry, store)
    ticks = 0

    async def ticker():
        nonlocal ticks
        while True:
            await asyncio.sleep(0.05)
            ticks += 1

    task = asyncio.create_task(ticker())
    started = time.monotonic()
    result = await interpreter.execute_workflow("wf-delay")
    elapsed = time.monotonic() - started
    task.cancel()

    assert result.success
    assert elapsed >= 0.45
    assert ticks >= 5


@pytest.mark.asyncio
@pytest.mark.parametrize("config, expected", [({}, 1.0), ({"delay": 0}, 0.0), ({"delay": -20}, 0.0), ({"delay": "250"}, 0.25)])
async def test_delay_values(registry, store, sleeper, config, expected):
    await registry.create_workflow(
        {
            "id": "wf-delay",
            "name": "delay",
            "nodes": [
                node("start", "start", "wait"),
                node("wait", "delay", "end", **config),
                node("end", "end"),
            ],
        }
    )

    await make_interpreter(registry, store, sleeper=sleeper).execute_workflow("wf-delay")

    assert sleeper.delays == [expected]


@pytest.mark.asyncio
async def test_unknown_node_type_passes_through(registry, store):
    workflow = await registry.create_workflow(
        {
            "id": "wf-unknown",
            "name": "unknown",
            "nodes": [
                node("start", "start", "mystery"),
                node("mystery", "sms", "end"),
                node("end", "end"),
            ],
        }
    )

    result = await make_interpreter(registry, store).execute_workflow("wf-unknown")

    assert workflow.nodes[1].type is NodeType.UNKNOWN
    assert workflow.nodes[1].raw_type == "sms"
    assert result.success
    assert result.outcome.node_id == "end"


@pytest.mark.asyncio
@pytest.mark.parametrize("start_count", [0, 2])
async def test_start_node_must_be_unique(registry, store, start_count):
    nodes = [node(f"start-{i}", "start", "end") for i in range(start_count)]
    nodes.append(node("end", "end"))
    await registry.create_workflow({"id": "wf-start", "name": "start", "nodes": nodes})

    result = await make_interpreter(registry, store).execute_workflow("wf-start", {"x": 1})

    assert result.success is False
    assert "start node" in result.error
    record = await store.get(result.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert record.context == {"x": 1}


@pytest.mark.asyncio
async def test_cycle_hits_visit_limit(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-loop",
            "name": "loop",
            "nodes": [node("start", "start", "spin"), node("spin", "action", "start")],
        }
    )
    settings = WorkflowSettings(WORKFLOW_MAX_NODE_VISITS=20)

    result = await make_interpreter(registry, store, settings=settings).execute_workflow("wf-loop")

    assert result.success is False
    assert "exceeded 20 node visits" in result.error
    assert (await store.get(result.execution_id)).status == ExecutionStatus.FAILED


@pytest.mark.asyncio
async def test_api_call_merges_response(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-api",
            "name": "api",
            "nodes": [
                node("start", "start", "call"),
                node("call", "api_call", "end", endpoint="https://example.test/rates"),
                node("end", "end"),
            ],
        }
    )
    caller = FakeApiCaller({"rate": 1.25})

    result = await make_interpreter(registry, store, api_caller=caller).execute_workflow(
        "wf-api", {"currency": "EGP"}
    )

    assert result.result == {"currency": "EGP", "rate": 1.25}
    assert caller.calls == [("https://example.test/rates", {"currency": "EGP"})]


@pytest.mark.asyncio
async def test_api_call_without_endpoint_is_skipped(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-api",
            "name": "api",
            "nodes": [node("start", "start", "call"), node("call", "api_call", "end"), node("end", "end")],
        }
    )
    caller = FakeApiCaller({"rate": 1.25})

    result = await make_interpreter(registry, store, api_caller=caller).execute_workflow("wf-api")

    assert result.success
    assert caller.calls == []


@pytest.mark.asyncio
async def test_non_mapping_output_fails_execution(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-api",
            "name": "api",
            "nodes": [
                node("start", "start", "call"),
                node("call", "api_call", "end", endpoint="https://example.test/list"),
                node("end", "end"),
            ],
        }
    )
    caller = FakeApiCaller(["not", "a", "mapping"])

    result = await make_interpreter(registry, store, api_caller=caller).execute_workflow(
        "wf-api", {"keep": "me"}
    )

    assert result.success is False
    assert "expected a mapping" in result.error
    assert (await store.get(result.execution_id)).context == {"keep": "me"}


@pytest.mark.asyncio
async def test_transform_reads_context_paths(registry, store):
    await registry.create_workflow(
        {
            "id": "wf-transform",
            "name": "transform",
            "nodes": [
                node(
                    "start", "start", "shape"
                ),
                node("shape", "transform", "end", transform={"email": "$body.email", "source": "form"}),
                node("end", "end"),
            ],
        }
    )

    result = await make_interpreter(registry, store).execute_workflow(
        "wf-transform", {"body": {"email": "a@b.co"}}
    )

    assert result.result["email"] == "a@b.co"
    assert result.result["source"] == "form"


@pytest.mark.asyncio
async def test_action_node_calls_executor(registry, store):
    seen: list[dict] = []

    async def tag_customer(params, context):
        seen.append({"params": dict(params), "amount": context["amount"]})
        return "ignored"

    executor = RegistryActionExecutor({"tag_customer": tag_customer})
    await registry.create_workflow(
        {
            "id": "wf-action",
            "name": "action",
            "nodes": [
                node("start", "start", "tag"),
                node("tag", "action", "end", action={"type": "tag_customer", "tag": "vip"}),
                node("end", "end"),
            ],
        }
    )

    result = await make_interpreter(registry, store, action_executor=executor).execute_workflow(
        "wf-action", {"amount": 10}
    )

    assert result.success
    assert result.result == {"amount": 10}
    assert seen == [{"params": {"type": "tag_customer", "tag": "vip"}, "amount": 10}]


@pytest.mark.asyncio
async def test_action_failure_is_recorded(registry, store):
    async def explode(params, context):
        context["touched"] = True
        raise RuntimeError("action exploded")

    await registry.create_workflow(
        {
            "id": "wf-boom",
            "name": "boom",
            "nodes": [node("start", "start", "boom"), node("boom", "action", "end", action="explode"), node("end", "end")],
        }
    )
    interpreter = make_interpreter(
        registry, store, action_executor=RegistryActionExecutor({"explode": explode})
    )

    result = await interpreter.execute_workflow("wf-boom")

    assert result.success is False
    assert result.error == "action exploded"
    record = await interpreter.get_execution(result.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert record.error == "action exploded"
    assert record.context == {"touched": True}


@pytest.mark.asyncio
async def test_uncopyable_value_written_by_action_is_kept(registry, store):
    lock = threading.Lock()

    async def open_session(params, context):
        context["session"] = lock
        context["tags"] = ["new"]

    await registry.create_workflow(
        {
            "id": "wf-session",
            "name": "session",
            "nodes": [
                node("start", "start", "open"),
                node("open", "action", "end", action="open_session"),
                node("end", "end"),
            ],
        }
    )
    interpreter = make_interpreter(
        registry, store, action_executor=RegistryActionExecutor({"open_session": open_session})
    )

    result = await interpreter.execute_workflow("wf-session")

    assert result.success
    record = await interpreter.get_execution(result.execution_id)
    assert record.status == ExecutionStatus.COMPLETED
    assert record.context["session"] is lock
    assert record.context["tags"] == ["new"]
    assert record.context["tags"] is not result.result["tags"]


@pytest.mark.asyncio
async def test_uncopyable_input_value_is_accepted(registry, store):
    lock = threading.Lock()
    await registry.create_workflow(
        {"id": "wf-lock", "name": "lock", "nodes": [node("start", "start", "end"), node("end", "end")]}
    )
    interpreter = make_interpreter(registry, store)

    result = await interpreter.execute_workflow("wf-lock", {"session": lock, "amount": 5})

    assert result.success
    assert result.result == {"session": lock, "amount": 5}
    assert len(store) == 1


@pytest.mark.asyncio
async def test_uncopyable_value_on_failure_is_recorded(registry, store):
    async def explode(params, context):
        context["session"] = threading.Lock()
        raise RuntimeError("session dropped")

    await registry.create_workflow(
        {
            "id": "wf-drop",
            "name": "drop",
            "nodes": [node("start", "start", "boom"), node("boom", "action", "end", action="explode"), node("end", "end")],
        }
    )
    interpreter = make_interpreter(
        registry, store, action_executor=RegistryActionExecutor({"explode": explode})
    )

    result = await interpreter.execute_workflow("wf-drop")

    assert result.success is False
    assert result.error == "session dropped"
    record = await interpreter.get_execution(result.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert "session" in record.context


@pytest.mark.asyncio
async def test_registry_failure_is_reported(store):
    class UnreachableRegistry(InMemoryWorkflowRegistry):
        async def get_workflow(self, workflow_id):
            raise ConnectionError("registry unreachable")

    interpreter = make_interpreter(UnreachableRegistry(), store)

    result = await interpreter.execute_workflow("wf-any")

    assert result.success is False
    assert result.execution_id == ""
    assert result.error == "registry unreachable"
    assert len(store) == 0


@pytest.mark.asyncio
async def test_stored_record_is_not_changed_through_lookup(registry, store):
    await registry.create_workflow(branching_workflow())
    interpreter = make_interpreter(registry, store)
    result = await interpreter.execute_workflow("wf-branch", {"amount": 150})

    fetched = await interpreter.get_execution(result.execution_id)
    fetched.context["route"] = "tampered"

    again = await interpreter.get_execution(result.execution_id)
    assert again.context["route"] == "A"


@pytest.mark.asyncio
async def test_message_nodes_use_sender(registry, store):
    sender = LoggingMessageSender()
    await registry.create_workflow(
        {
            "id": "wf-msg",
            "name": "messages",
            "nodes": [
                node("start", "start", "mail"),
                node("mail", "email", "ping", template="welcome"),
                node("ping", "notification", "end", message="new signup"),
                node("end", "end"),
            ],
        }
    )

    result = await make_interpreter(registry, store, message_sender=sender).execute_workflow("wf-msg")

    assert result.success
    assert [m["channel"] for m in sender.sent] == ["email", "notification"]


@pytest.mark.asyncio
async def test_lifecycle_events(registry, store, bus):
    await registry.create_workflow(branching_workflow())

    result = await make_interpreter(registry, store, bus=bus).execute_workflow(
        "wf-branch", {"amount": 1}
    )

    assert bus.names == [
        "workflow.started",
        "workflow.node.executed",
        "workflow.node.executed",
        "workflow.node.executed",
        "workflow.node.executed",
        "workflow.finished",
    ]
    executed = [e.payload["node_id"] for e in bus.events if e.name == "workflow.node.executed"]
    assert executed == ["start", "check", "b", "end"]
    assert all(e.metadata.execution_id == result.execution_id for e in bus.events)
    assert bus.events[-1].payload["outcome"] == "completed"


def test_incomplete_handler_table_is_rejected(registry, store):
    handlers = dict(DEFAULT_HANDLERS)
    del handlers[NodeType.DELAY]

    with pytest.raises(RuntimeError, match="delay"):
        make_interpreter(registry, store, handlers=handlers)

"""Tests for form submission and endpoint triggers."""

import pytest
import pytest_asyncio

from orchestration.interpreter import WorkflowInterpreter
from orchestration.triggers import EndpointTrigger, FormSubmissionTrigger


@pytest_asyncio.fixture
async def wired(registry, store):
    await registry.load(
        workflows=[
            {
                "id": "wf-echo",
                "name": "echo",
                "nodes": [
                    {"id": "start", "type": "start", "connections": {"next": "shape"}},
                    {
                        "id": "shape",
                        "type": "transform",
                        "config": {"transform": {"handled": True}},
                        "connections": {"next": "end"},
                    },
                    {"id": "end", "type": "end"},
                ],
            },
            {"id": "wf-broken", "name": "no start", "nodes": [{"id": "end", "type": "end"}]},
        ],
        forms=[
            {"id": "form-wf", "name": "Signup", "submitAction": {"type": "workflow", "workflowId": "wf-echo"}},
            {"id": "form-api", "name": "Contact", "submitAction": {"type": "api", "endpoint": "/contact"}},
        ],
        endpoints=[
            {"id": "ep-wf", "name": "Run", "path": "/run", "handler": {"type": "workflow", "workflowId": "wf-echo"}, "status_code": 202},
            {"id": "ep-broken", "name": "Broken", "path": "/broken", "handler": {"type": "workflow", "workflowId": "wf-broken"}},
            {"id": "ep-form", "name": "Form", "path": "/signup", "handler": {"type": "form", "formId": "form-wf"}},
            {"id": "ep-custom", "name": "Ping", "path": "/ping", "method": "GET", "handler": {"type": "custom"}},
            {
                "id": "ep-private",
                "name": "Private",
                "path": "/private",
                "handler": {"type": "custom"},
                "authentication": {"required": True},
            },
        ],
    )
    interpreter = WorkflowInterpreter(registry=registry, execution_store=store)
    form_trigger = FormSubmissionTrigger(registry, interpreter)
    return form_trigger, EndpointTrigger(registry, interpreter, form_trigger)


@pytest.mark.asyncio
async def test_form_runs_workflow(wired, store):
    form_trigger, _ = wired

    result = await form_trigger.submit("form-wf", {"email": "a@b.co"})

    assert result.success
    assert result.message == "Form submitted successfully"
    assert result.data == {"email": "a@b.co", "handled": True}
    assert await store.get(result.execution.execution_id) is not None


@pytest.mark.asyncio
async def test_form_with_other_action_is_acknowledged(wired, store):
    form_trigger, _ = wired

    result = await form_trigger.submit("form-api", {"msg": "hi"})

    assert result.success
    assert result.execution is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_unknown_form(wired):
    form_trigger, _ = wired

    result = await form_trigger.submit("nope", {})

    assert not result.success
    assert result.message == "Form not found"


@pytest.mark.asyncio
async def test_endpoint_runs_workflow_with_request_parts(wired):
    _, endpoint_trigger = wired

    response = await endpoint_trigger.invoke(
        "ep-wf", body={"x": 1}, query={"q": "2"}, params={"id": "7"}
    )

    assert response.status_code == 202
    assert response.body["result"] == {
        "body": {"x": 1},
        "query": {"q": "2"},
        "params": {"id": "7"},
        "handled": True,
    }


@pytest.mark.asyncio
async def test_endpoint_failed_workflow_is_500(wired):
    _, endpoint_trigger = wired

    response = await endpoint_trigger.invoke("ep-broken")

    assert response.status_code == 500
    assert "no start node" in response.body["error"]


@pytest.mark.asyncio
async def test_endpoint_form_handler(wired):
    _, endpoint_trigger = wired

    response = await endpoint_trigger.invoke("ep-form", body={"email": "a@b.co"})

    assert response.status_code == 200
    assert response.body["data"]["handled"] is True


@pytest.mark.asyncio
async def test_endpoint_custom_handler(wired):
    _, endpoint_trigger = wired

    response = await endpoint_trigger.invoke("ep-custom")

    assert response.status_code == 200
    assert response.body == {"message": "Endpoint executed successfully"}


@pytest.mark.asyncio
async def test_endpoint_not_found(wired):
    _, endpoint_trigger = wired

    assert (await endpoint_trigger.invoke("missing")).status_code == 404


@pytest.mark.asyncio
async def test_endpoint_requires_authorization_header(wired):
    _, endpoint_trigger = wired

    denied = await endpoint_trigger.invoke("ep-private")
    allowed = await endpoint_trigger.invoke("ep-private", headers={"Authorization": "Bearer t"})

    assert denied.status_code == 401
    assert allowed.status_code == 200

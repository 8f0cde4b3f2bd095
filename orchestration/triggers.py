"""Form submission and endpoint triggers that start workflow executions."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .interpreter import WorkflowInterpreter
from .models import ExecutionResult
from .registry import WorkflowRegistry

logger = logging.getLogger(__name__)


@dataclass
class FormSubmissionResult:
    success: bool
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    execution: Optional[ExecutionResult] = None


@dataclass
class EndpointResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


class FormSubmissionTrigger:
    """Routes a form submission to the form's submit action."""

    def __init__(self, registry: WorkflowRegistry, interpreter: WorkflowInterpreter) -> None:
        self._registry = registry
        self._interpreter = interpreter

    async def submit(self, form_id: str, data: Mapping[str, Any]) -> FormSubmissionResult:
        """
        Submit data to a form.

        Args:
            form_id: Registered form id
            data: Submitted field values

        Returns:
            FormSubmissionResult; a workflow submit action carries the execution
        """
        form = await self._registry.get_form(form_id)
        if form is None:
            return FormSubmissionResult(success=False, message="Form not found")

        action = form.submit_action
        if action is not None and action.type == "workflow" and action.workflow_id:
            execution = await self._interpreter.execute_workflow(action.workflow_id, dict(data))
            message = (
                "Form submitted successfully"
                if execution.success
                else f"Form workflow failed: {execution.error}"
            )
            return FormSubmissionResult(
                success=execution.success,
                message=message,
                data=dict(execution.result or {}),
                execution=execution,
            )

        logger.info(f"Form {form_id} submitted (action: {action.type if action else 'none'})")
        return FormSubmissionResult(
            success=True, message="Form submitted successfully", data=dict(data)
        )


class EndpointTrigger:
    """Invokes a registered endpoint's handler."""

    def __init__(
        self,
        registry: WorkflowRegistry,
        interpreter: WorkflowInterpreter,
        form_trigger: Optional[FormSubmissionTrigger] = None,
    ) -> None:
        self._registry = registry
        self._interpreter = interpreter
        self._form_trigger = form_trigger or FormSubmissionTrigger(registry, interpreter)

    async def invoke(
        self,
        endpoint_id: str,
        body: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> EndpointResponse:
        """
        Invoke an endpoint.

        Args:
            endpoint_id: Registered endpoint id
            body: Request body
            query: Query string values
            params: Path parameters
            headers: Request headers, matched case-insensitively

        Returns:
            EndpointResponse with an HTTP-style status code
        """
        endpoint = await self._registry.get_endpoint(endpoint_id)
        if endpoint is None:
            return EndpointResponse(404, {"error": "Endpoint not found"})

        lowered = {k.lower(): v for k, v in (headers or {}).items()}
        if endpoint.authentication and endpoint.authentication.required:
            if not lowered.get("authorization"):
                return EndpointResponse(401, {"error": "Authentication required"})

        body = dict(body or {})
        try:
            handler = endpoint.handler
            if handler.type == "workflow" and handler.workflow_id:
                execution = await self._interpreter.execute_workflow(
                    handler.workflow_id,
                    {"body": body, "query": dict(query or {}), "params": dict(params or {})},
                )
                if not execution.success:
                    return EndpointResponse(
                        500, {"error": execution.error, "executionId": execution.execution_id}
                    )
                return EndpointResponse(
                    endpoint.status_code,
                    {"executionId": execution.execution_id, "result": execution.result},
                )

            if handler.type == "form" and handler.form_id:
                submitted = await self._form_trigger.submit(handler.form_id, body)
                status = endpoint.status_code if submitted.success else 400
                return EndpointResponse(
                    status, {"message": submitted.message, "data": submitted.data}
                )

            return EndpointResponse(
                endpoint.status_code, {"message": "Endpoint executed successfully"}
            )
        except Exception as exc:
            logger.error(f"❌ Endpoint {endpoint_id} failed: {exc}", exc_info=True)
            return EndpointResponse(500, {"error": str(exc)})

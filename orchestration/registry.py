"""Workflow/form/endpoint registry and execution store."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Dict, List, Optional, Union

from core.domain.value_objects import ExecutionID
from core.utils.datetime import utc_now

from .definitions import EndpointDefinition, FormDefinition, WorkflowDefinition
from .models import ExecutionRecord

logger = logging.getLogger(__name__)


class WorkflowRegistry(ABC):
    """Read contract the interpreter and triggers depend on."""

    @abstractmethod
    async def get_workflow(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        """Look up a workflow definition by id."""
        pass

    @abstractmethod
    async def get_form(self, form_id: str) -> Optional[FormDefinition]:
        """Look up a form definition by id."""
        pass

    @abstractmethod
    async def get_endpoint(self, endpoint_id: str) -> Optional[EndpointDefinition]:
        """Look up an endpoint definition by id."""
        pass


class InMemoryWorkflowRegistry(WorkflowRegistry):
    """
    Registry kept in process memory.

    Instances are created and injected explicitly; load definitions at
    startup with ``load`` or one at a time with the ``create_*`` methods.
    """

    def __init__(self) -> None:
        self._workflows: Dict[str, WorkflowDefinition] = {}
        self._forms: Dict[str, FormDefinition] = {}
        self._endpoints: Dict[str, EndpointDefinition] = {}

    async def load(
        self,
        workflows: Iterable[Union[WorkflowDefinition, Dict[str, Any]]] = (),
        forms: Iterable[Union[FormDefinition, Dict[str, Any]]] = (),
        endpoints: Iterable[Union[EndpointDefinition, Dict[str, Any]]] = (),
    ) -> None:
        """Bulk-register definitions, keeping ids they already carry."""
        for workflow in workflows:
            await self.create_workflow(workflow)
        for form in forms:
            await self.create_form(form)
        for endpoint in endpoints:
            await self.create_endpoint(endpoint)
        logger.info(
            f"Registry loaded: {len(self._workflows)} workflow(s), "
            f"{len(self._forms)} form(s), {len(self._endpoints)} endpoint(s)"
        )

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def create_workflow(
        self, definition: Union[WorkflowDefinition, Dict[str, Any]]
    ) -> WorkflowDefinition:
        workflow = WorkflowDefinition.model_validate(definition)
        now = utc_now()
        workflow = workflow.model_copy(
            update={
                "id": workflow.id or ExecutionID.generate("workflow").value,
                "created_at": workflow.created_at or now,
                "updated_at": now,
            }
        )
        self._workflows[workflow.id] = workflow
        logger.info(f"Workflow registered: {workflow.id} ({workflow.name})")
        return workflow

    async def get_workflow(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        return self._workflows.get(workflow_id)

    async def list_workflows(self) -> List[WorkflowDefinition]:
        return list(self._workflows.values())

    async def update_workflow(
        self, workflow_id: str, updates: Dict[str, Any]
    ) -> Optional[WorkflowDefinition]:
        current = self._workflows.get(workflow_id)
        if current is None:
            return None
        merged = {**current.model_dump(), **updates, "id": workflow_id, "updated_at": utc_now()}
        workflow = WorkflowDefinition.model_validate(merged)
        self._workflows[workflow_id] = workflow
        return workflow

    async def delete_workflow(self, workflow_id: str) -> bool:
        return self._workflows.pop(workflow_id, None) is not None

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    async def create_form(self, definition: Union[FormDefinition, Dict[str, Any]]) -> FormDefinition:
        form = FormDefinition.model_validate(definition)
        now = utc_now()
        form = form.model_copy(
            update={
                "id": form.id or ExecutionID.generate("form").value,
                "created_at": form.created_at or now,
                "updated_at": now,
            }
        )
        self._forms[form.id] = form
        return form

    async def get_form(self, form_id: str) -> Optional[FormDefinition]:
        return self._forms.get(form_id)

    async def list_forms(self) -> List[FormDefinition]:
        return list(self._forms.values())

    async def delete_form(self, form_id: str) -> bool:
        return self._forms.pop(form_id, None) is not None

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def create_endpoint(
        self, definition: Union[EndpointDefinition, Dict[str, Any]]
    ) -> EndpointDefinition:
        """Register an endpoint.

        Raises:
            ValueError: If another endpoint already uses the same method and path
        """
        endpoint = EndpointDefinition.model_validate(definition)
        clash = await self.find_endpoint(endpoint.method, endpoint.path)
        if clash is not None and clash.id != endpoint.id:
            raise ValueError(f"Route {endpoint.route_key} already registered by {clash.id}")

        now = utc_now()
        endpoint = endpoint.model_copy(
            update={
                "id": endpoint.id or ExecutionID.generate("endpoint").value,
                "created_at": endpoint.created_at or now,
                "updated_at": now,
            }
        )
        self._endpoints[endpoint.id] = endpoint
        return endpoint

    async def get_endpoint(self, endpoint_id: str) -> Optional[EndpointDefinition]:
        return self._endpoints.get(endpoint_id)

    async def find_endpoint(self, method: str, path: str) -> Optional[EndpointDefinition]:
        route_key = f"{method.upper()}:{path}"
        for endpoint in self._endpoints.values():
            if endpoint.route_key == route_key:
                return endpoint
        return None

    async def list_endpoints(self) -> List[EndpointDefinition]:
        return list(self._endpoints.values())

    async def delete_endpoint(self, endpoint_id: str) -> bool:
        return self._endpoints.pop(endpoint_id, None) is not None


class ExecutionStore(ABC):
    """Keeps execution records for later lookup by id."""

    @abstractmethod
    async def save(self, record: ExecutionRecord) -> None:
        pass

    @abstractmethod
    async def get(self, execution_id: str) -> Optional[ExecutionRecord]:
        pass


class InMemoryExecutionStore(ExecutionStore):
    def __init__(self) -> None:
        self._records: Dict[str, ExecutionRecord] = {}

    async def save(self, record: ExecutionRecord) -> None:
        self._records[record.execution_id] = record

    async def get(self, execution_id: str) -> Optional[ExecutionRecord]:
        record = self._records.get(execution_id)
        return record.detached() if record is not None else None

    async def list_for_workflow(self, workflow_id: str) -> List[ExecutionRecord]:
        return [r for r in self._records.values() if r.workflow_id == workflow_id]

    def __len__(self) -> int:
        return len(self._records)

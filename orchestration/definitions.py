"""Workflow, form and endpoint definitions stored in the registry."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeType(str, Enum):
    """Closed set of node types understood by the interpreter."""

    START = "start"
    END = "end"
    ACTION = "action"
    CONDITION = "condition"
    API_CALL = "api_call"
    EMAIL = "email"
    NOTIFICATION = "notification"
    DELAY = "delay"
    TRANSFORM = "transform"
    # Any type string not listed above
    UNKNOWN = "unknown"


_KNOWN_TYPES = frozenset(t.value for t in NodeType)


class NodeConnections(BaseModel):
    """Outgoing edges of a node, by target node id."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    next: Optional[str] = None
    on_true: Optional[str] = Field(None, alias="onTrue")
    on_false: Optional[str] = Field(None, alias="onFalse")


class WorkflowNode(BaseModel):
    """A typed node in a workflow graph."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Node identifier")
    type: NodeType = Field(..., description="Node type")
    label: str = Field(default="", description="Display label")
    config: Dict[str, Any] = Field(default_factory=dict, description="Node options")
    connections: NodeConnections = Field(default_factory=NodeConnections)
    raw_type: Optional[str] = Field(None, description="Original type string when type is UNKNOWN")

    @model_validator(mode="before")
    @classmethod
    def _map_unknown_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw = data.get("type")
        if isinstance(raw, str) and not isinstance(raw, NodeType) and raw not in _KNOWN_TYPES:
            data["type"] = NodeType.UNKNOWN
            data["raw_type"] = raw
        for key in ("config", "connections"):
            if data.get(key) is None:
                data[key] = {}
        return data


class WorkflowTrigger(BaseModel):
    """How a workflow is meant to be started."""

    type: Literal["manual", "api", "schedule", "event"] = "manual"
    config: Dict[str, Any] = Field(default_factory=dict)


class WorkflowDefinition(BaseModel):
    """A declarative directed graph of typed nodes."""

    id: str = Field(default="", description="Workflow identifier")
    name: str = Field(..., description="Workflow name")
    description: Optional[str] = None
    nodes: List[WorkflowNode] = Field(default_factory=list)
    variables: Dict[str, Any] = Field(default_factory=dict, description="Context seed")
    trigger: Optional[WorkflowTrigger] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def start_nodes(self) -> List[WorkflowNode]:
        return [node for node in self.nodes if node.type is NodeType.START]

    def node_index(self) -> Dict[str, WorkflowNode]:
        """Nodes keyed by id. The first node wins on duplicate ids."""
        index: Dict[str, WorkflowNode] = {}
        for node in self.nodes:
            index.setdefault(node.id, node)
        return index


class FormSubmitAction(BaseModel):
    """What happens when a form is submitted."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["api", "workflow", "custom"]
    endpoint: Optional[str] = None
    method: Optional[Literal["POST", "PUT", "PATCH"]] = None
    workflow_id: Optional[str] = Field(None, alias="workflowId")


class FormDefinition(BaseModel):
    """Form metadata needed to route submissions. Field layout is not modelled."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    description: Optional[str] = None
    submit_action: Optional[FormSubmitAction] = Field(None, alias="submitAction")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EndpointHandler(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["workflow", "form", "custom", "database"]
    workflow_id: Optional[str] = Field(None, alias="workflowId")
    form_id: Optional[str] = Field(None, alias="formId")


class EndpointAuthentication(BaseModel):
    required: bool = False
    roles: List[str] = Field(default_factory=list)


class EndpointDefinition(BaseModel):
    """A dynamically exposed trigger point."""

    id: str = ""
    name: str
    path: str
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "POST"
    description: Optional[str] = None
    handler: EndpointHandler
    authentication: Optional[EndpointAuthentication] = None
    status_code: int = 200
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def route_key(self) -> str:
        return f"{self.method}:{self.path}"

from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class WorkflowSettings(OrdersBaseSettings):
    """
    Workflow interpreter settings.
    Loaded from .env file with exact variable name matching.
    """

    default_delay_ms: int = Field(default=1000, ge=0, alias="WORKFLOW_DEFAULT_DELAY_MS")
    max_node_visits: int = Field(default=1000, gt=0, alias="WORKFLOW_MAX_NODE_VISITS")
    api_timeout_seconds: float = Field(default=30.0, gt=0, alias="WORKFLOW_API_TIMEOUT_SECONDS")

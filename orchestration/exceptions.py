"""Workflow interpreter exceptions."""


class WorkflowExecutionError(Exception):
    """Base class for faults raised while walking a workflow graph."""


class MissingStartNodeError(WorkflowExecutionError):
    """Workflow has no start node, or more than one."""

    def __init__(self, workflow_id: str, count: int):
        self.workflow_id = workflow_id
        self.count = count
        if count == 0:
            message = f"Workflow {workflow_id} has no start node"
        else:
            message = f"Workflow {workflow_id} has {count} start nodes, expected exactly one"
        super().__init__(message)


class NodeVisitLimitExceeded(WorkflowExecutionError):
    """Traversal visited more nodes than allowed, usually a cycle."""

    def __init__(self, workflow_id: str, limit: int, node_id: str):
        self.workflow_id = workflow_id
        self.limit = limit
        self.node_id = node_id
        super().__init__(
            f"Workflow {workflow_id} exceeded {limit} node visits at node {node_id}"
        )


class WorkflowNodeError(WorkflowExecutionError):
    """A node produced something the interpreter cannot use."""

    def __init__(self, node_id: str, message: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id}: {message}")


class ApiCallError(WorkflowExecutionError):
    """An api_call node received a non-success response."""

    def __init__(self, endpoint: str, status: int, body: str = ""):
        self.endpoint = endpoint
        self.status = status
        super().__init__(f"API call to {endpoint} failed with status {status}: {body[:200]}")

"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for a workflow execution (or any generated record id)."""

    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Execution id cannot be empty")

    @classmethod
    def generate(cls, prefix: str = "exec") -> "ExecutionID":
        """Generate a new id such as ``exec_3f2a...``."""
        return cls(value=f"{prefix}_{uuid4().hex}")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

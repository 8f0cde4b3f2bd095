"""Ordered step pipeline used by the order processor."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from core.domain.entities.order import Order


logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    """How a step failure affects the pipeline."""

    REQUIRED = "required"
    BEST_EFFORT = "best_effort"


@dataclass
class ProcessingRun:
    """Mutable state for a single pass of an order through the pipeline."""

    order: Order
    proof: Optional[bytes] = None
    warnings: List[str] = field(default_factory=list)
    completed_steps: List[str] = field(default_factory=list)


StepAction = Callable[[ProcessingRun], Awaitable[None]]


@dataclass(frozen=True)
class ProcessingStep:
    """A named pipeline step."""

    name: str
    kind: StepKind
    action: StepAction


async def run_pipeline(steps: List[ProcessingStep], run: ProcessingRun) -> ProcessingRun:
    """Execute steps in order.

    A required step re-raises its exception to the caller. A best-effort
    step failure is recorded on ``run.warnings`` and the next step runs.

    Args:
        steps: Steps in execution order
        run: Per-order run state

    Returns:
        The same run, after all steps executed
    """
    for step in steps:
        try:
            await step.action(run)
        except Exception as exc:
            if step.kind is StepKind.REQUIRED:
                logger.error(f"Required step '{step.name}' failed for order {run.order.id}: {exc}")
                raise
            logger.warning(f"⚠️ Best-effort step '{step.name}' failed for order {run.order.id}: {exc}")
            run.warnings.append(f"{step.name}: {exc}")
            continue
        run.completed_steps.append(step.name)
    return run

"""CompletionEngine: task toggles and phase completion.

Toggling a task is two independent writes: the task row, then the phase's
recomputed completion. Nothing spans them, so if the second write fails the
task change stands and the phase percentage stays stale until the next
toggle. Admins may also set a phase's completion directly; whichever write
lands last wins.
"""

from dataclasses import dataclass

import structlog

from portal.core.exceptions import InvalidInputError
from portal.domain.progress import compute_phase_completion, validate_completion
from portal.gateway.protocol import PersistenceGateway, Record

logger = structlog.get_logger(__name__)


@dataclass
class CompletionResult:
    """Outcome of a task toggle.

    phase_completion is None when the phase had no tasks to derive it from
    and the stored value was left untouched.
    """

    task: Record
    phase_completion: int | None


class CompletionEngine:
    """Keeps phase completion in step with task checkboxes."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def set_task_completion(self, task_id: str, completed: bool) -> CompletionResult:
        """Set a task's completed flag and recompute its phase's completion.

        Raises:
            NotFoundError: If the task does not exist
            GatewayError: If either write fails (the first may already be committed)
        """
        task = await self.gateway.update("tasks", task_id, {"completed": completed})

        phase_tasks = await self.gateway.select_many("tasks", {"phase_id": task["phase_id"]}, order_by="task_order")
        completion = compute_phase_completion(phase_tasks)
        if completion is None:
            logger.info("phase_completion_skipped", phase_id=task["phase_id"], reason="no_tasks")
            return CompletionResult(task=task, phase_completion=None)

        await self.gateway.update("phases", task["phase_id"], {"completion": completion})
        logger.info(
            "task_completion_set",
            task_id=task_id,
            phase_id=task["phase_id"],
            completed=completed,
            phase_completion=completion,
        )
        return CompletionResult(task=task, phase_completion=completion)

    async def set_phase_completion_direct(self, phase_id: str, completion: int) -> Record:
        """Admin override: write a phase's completion without consulting its tasks.

        Raises:
            InvalidInputError: If completion is outside 0-100
            NotFoundError: If the phase does not exist
        """
        try:
            value = validate_completion(completion)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        phase = await self.gateway.update("phases", phase_id, {"completion": value})
        logger.info("phase_completion_overridden", phase_id=phase_id, completion=value)
        return phase

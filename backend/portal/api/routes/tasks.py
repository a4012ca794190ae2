"""Admin task routes."""

from fastapi import APIRouter, Depends

from portal.api.deps import get_completion_engine
from portal.core.auth import AdminSession, require_admin
from portal.schemas.projects import TaskCompletionRequest, TaskCompletionResponse
from portal.services.completion_service import CompletionEngine

router = APIRouter()


@router.patch("/{task_id}", response_model=TaskCompletionResponse)
async def set_task_completion(
    task_id: str,
    request: TaskCompletionRequest,
    admin: AdminSession = Depends(require_admin),
    engine: CompletionEngine = Depends(get_completion_engine),
):
    """Check or uncheck a task and recompute its phase's completion.

    phase_completion is null when the phase has no tasks.
    """
    result = await engine.set_task_completion(task_id, request.completed)
    return TaskCompletionResponse(task=result.task, phase_completion=result.phase_completion)

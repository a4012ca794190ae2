"""Admin phase routes: manual completion, next steps, status."""

from fastapi import APIRouter, Depends

from portal.api.deps import get_completion_engine, get_project_service
from portal.core.auth import AdminSession, require_admin
from portal.schemas.projects import (
    NextStepsRequest,
    PhaseCompletionRequest,
    PhaseResponse,
    PhaseStatusRequest,
)
from portal.services.completion_service import CompletionEngine
from portal.services.project_service import ProjectService

router = APIRouter()


@router.patch("/{phase_id}/completion", response_model=PhaseResponse)
async def set_phase_completion(
    phase_id: str,
    request: PhaseCompletionRequest,
    admin: AdminSession = Depends(require_admin),
    engine: CompletionEngine = Depends(get_completion_engine),
):
    """Override a phase's completion. The next task toggle in the phase recomputes it."""
    return await engine.set_phase_completion_direct(phase_id, request.completion)


@router.patch("/{phase_id}/next-steps", response_model=PhaseResponse)
async def set_next_steps(
    phase_id: str,
    request: NextStepsRequest,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    return await service.update_next_steps(phase_id, request.next_steps)


@router.patch("/{phase_id}/status", response_model=PhaseResponse)
async def set_phase_status(
    phase_id: str,
    request: PhaseStatusRequest,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    return await service.update_phase_status(phase_id, request.status.value)

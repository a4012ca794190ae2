"""Admin deliverable routes: status and comments."""

from fastapi import APIRouter, Depends

from portal.api.deps import get_deliverable_service
from portal.core.auth import AdminSession, require_admin
from portal.schemas.projects import (
    CommentCreateRequest,
    CommentResponse,
    DeliverableResponse,
    DeliverableStatusRequest,
)
from portal.services.deliverable_service import DeliverableService

router = APIRouter()


@router.patch("/{deliverable_id}/status", response_model=DeliverableResponse)
async def set_deliverable_status(
    deliverable_id: str,
    request: DeliverableStatusRequest,
    admin: AdminSession = Depends(require_admin),
    service: DeliverableService = Depends(get_deliverable_service),
):
    return await service.set_status(deliverable_id, request.status.value)


@router.get("/{deliverable_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    deliverable_id: str,
    admin: AdminSession = Depends(require_admin),
    service: DeliverableService = Depends(get_deliverable_service),
):
    return await service.list_comments(deliverable_id)


@router.post("/{deliverable_id}/comments", response_model=CommentResponse, status_code=201)
async def add_admin_comment(
    deliverable_id: str,
    request: CommentCreateRequest,
    admin: AdminSession = Depends(require_admin),
    service: DeliverableService = Depends(get_deliverable_service),
):
    """Post a comment as the agency team."""
    project_id = await service.project_id_for(deliverable_id)
    return await service.add_comment(project_id, deliverable_id, "admin", request.message)

"""Admin project routes: CRUD, duplication, files, onboarding review."""

import json
from dataclasses import asdict

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from portal.api.deps import (
    get_file_service,
    get_onboarding_capture,
    get_project_cloner,
    get_project_service,
)
from portal.core.auth import AdminSession, require_admin
from portal.schemas.onboarding import OnboardingViewResponse
from portal.schemas.projects import (
    DuplicateProjectResponse,
    FileResponse,
    ProjectCreateRequest,
    ProjectResponse,
    ProjectTreeResponse,
    ProjectUpdateRequest,
)
from portal.services.clone_service import ProjectCloner
from portal.services.file_service import FileService
from portal.services.onboarding_service import OnboardingCapture
from portal.services.project_service import ProjectService

router = APIRouter()


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    """All projects, newest first."""
    return await service.list_projects()


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    request: ProjectCreateRequest,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project seeded with the five default phases.

    Raises:
        InvalidInputError(400): If the passcode is already taken
    """
    return await service.create_project(
        client_name=request.client_name,
        project_name=request.project_name,
        passcode=request.passcode,
        start_date=request.start_date,
        launch_date=request.launch_date,
    )


@router.get("/{project_id}", response_model=ProjectTreeResponse)
async def get_project(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    """Project with phases, tasks, deliverables, comments and files."""
    return await service.get_project_tree(project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    request: ProjectUpdateRequest,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    """Update the fields present in the body; omitted fields are unchanged."""
    return await service.update_project(project_id, request.model_dump(exclude_unset=True))


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project and everything under it."""
    await service.delete_project(project_id)


@router.post("/{project_id}/duplicate", response_model=DuplicateProjectResponse, status_code=201)
async def duplicate_project(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    cloner: ProjectCloner = Depends(get_project_cloner),
):
    """Copy a project's structure (no progress, comments or files) into a new project."""
    new_id = await cloner.duplicate_project(project_id)
    return DuplicateProjectResponse(project_id=new_id)


@router.get("/{project_id}/files", response_model=list[FileResponse])
async def list_files(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    files: FileService = Depends(get_file_service),
):
    return await files.list_files(project_id)


@router.post("/{project_id}/files", response_model=FileResponse, status_code=201)
async def upload_file(
    project_id: str,
    file: UploadFile = File(...),
    deliverable_id: str | None = Form(default=None),
    admin: AdminSession = Depends(require_admin),
    files: FileService = Depends(get_file_service),
):
    """Upload an attachment, optionally tied to one of the project's deliverables."""
    data = await file.read()
    return await files.upload_file(
        project_id=project_id,
        file_name=file.filename or "",
        data=data,
        content_type=file.content_type,
        uploaded_by="admin",
        deliverable_id=deliverable_id or None,
    )


@router.get("/{project_id}/onboarding", response_model=OnboardingViewResponse)
async def view_onboarding(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    onboarding: OnboardingCapture = Depends(get_onboarding_capture),
):
    """Latest questionnaire submission, rendered into sections.

    Raises:
        NotFoundError(404): If the client has not submitted yet
    """
    row, sections = await onboarding.render_latest(project_id)
    return OnboardingViewResponse(
        response_id=row["id"],
        submitted_at=row["submitted_at"],
        sections=[asdict(s) for s in sections],
    )


@router.get("/{project_id}/onboarding/export")
async def export_onboarding(
    project_id: str,
    admin: AdminSession = Depends(require_admin),
    onboarding: OnboardingCapture = Depends(get_onboarding_capture),
):
    """Latest submission as a downloadable JSON file."""
    document = await onboarding.export_response(project_id)
    return Response(
        content=json.dumps(document, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="onboarding-{project_id}.json"'},
    )

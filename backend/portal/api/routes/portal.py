"""Client portal routes.

Everything under /portal/{project_id} requires the project's passcode in the
X-Project-Passcode header. The client can read the project tree, comment on
deliverables and fill in the onboarding questionnaire.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from portal.api.deps import (
    get_deliverable_service,
    get_onboarding_capture,
    get_passcode_gate,
    get_project_service,
    require_passcode,
)
from portal.core.exceptions import NotFoundError
from portal.gateway.protocol import Record
from portal.schemas.auth import PasscodeLookupRequest, PasscodeLookupResponse
from portal.schemas.onboarding import (
    AssetUploadResponse,
    OnboardingResponseV1,
    OnboardingStatusResponse,
    OnboardingSubmitResponse,
)
from portal.schemas.projects import CommentCreateRequest, CommentResponse, PortalTreeResponse
from portal.services.deliverable_service import DeliverableService
from portal.services.onboarding_service import OnboardingCapture
from portal.services.passcode_gate import PasscodeGate
from portal.services.project_service import ProjectService

router = APIRouter()


@router.post("/lookup", response_model=PasscodeLookupResponse)
async def lookup_project(
    request: PasscodeLookupRequest,
    gate: PasscodeGate = Depends(get_passcode_gate),
):
    """Find which project a passcode opens (landing page form).

    Raises:
        NotFoundError(404): If no project has this passcode
    """
    project = await gate.lookup(request.passcode)
    if project is None:
        raise NotFoundError("projects", "passcode")
    return PasscodeLookupResponse(project_id=project["id"])


@router.get("/{project_id}", response_model=PortalTreeResponse)
async def get_portal_project(
    project: Record = Depends(require_passcode),
    service: ProjectService = Depends(get_project_service),
):
    """Full project tree for the client; the passcode itself is not returned."""
    return await service.get_project_tree(project["id"])


@router.post(
    "/{project_id}/deliverables/{deliverable_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
async def add_client_comment(
    deliverable_id: str,
    request: CommentCreateRequest,
    project: Record = Depends(require_passcode),
    service: DeliverableService = Depends(get_deliverable_service),
):
    """Post a comment as the client; it is signed with the project's client name."""
    return await service.add_comment(project["id"], deliverable_id, "client", request.message)


@router.post("/{project_id}/onboarding", response_model=OnboardingSubmitResponse, status_code=201)
async def submit_onboarding(
    request: OnboardingResponseV1,
    project: Record = Depends(require_passcode),
    onboarding: OnboardingCapture = Depends(get_onboarding_capture),
):
    """Submit the onboarding questionnaire."""
    row = await onboarding.submit(project["id"], request)
    return OnboardingSubmitResponse(response_id=row["id"], submitted_at=row["submitted_at"])


@router.get("/{project_id}/onboarding/status", response_model=OnboardingStatusResponse)
async def get_onboarding_status(
    project: Record = Depends(require_passcode),
):
    """Whether the client has completed onboarding."""
    return OnboardingStatusResponse(
        onboarding_completed=project["onboarding_completed"],
        onboarding_completed_at=project["onboarding_completed_at"],
    )


@router.post("/{project_id}/onboarding/assets/{kind}", response_model=AssetUploadResponse, status_code=201)
async def upload_onboarding_asset(
    kind: str,
    file: UploadFile = File(...),
    project: Record = Depends(require_passcode),
    onboarding: OnboardingCapture = Depends(get_onboarding_capture),
):
    """Upload a brand asset; the returned URL goes into `{kind}_urls` on submit.

    kind is one of brand_guide, logo, font, media.
    """
    data = await file.read()
    url = await onboarding.upload_asset(
        project_id=project["id"],
        kind=kind,
        file_name=file.filename or "",
        data=data,
        content_type=file.content_type,
    )
    return AssetUploadResponse(kind=kind, url=url)

"""Project tree Pydantic schemas: API contracts for admin and client views."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from portal.domain.phases import DeliverableStatus, PhaseStatus, UserType


def _strip_required(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("Value cannot be empty or whitespace-only")
    return stripped


class ProjectCreateRequest(BaseModel):
    """Request to create a project seeded with the default phases."""

    client_name: str = Field(..., min_length=1, max_length=255)
    project_name: str = Field(..., min_length=1, max_length=255)
    passcode: str | None = Field(default=None, max_length=64)
    start_date: date | None = None
    launch_date: date | None = None

    @field_validator("client_name", "project_name")
    @classmethod
    def reject_whitespace_only(cls, v: str) -> str:
        return _strip_required(v)


class ProjectUpdateRequest(BaseModel):
    """Partial update of a project's editable fields. Omitted fields are left alone."""

    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    project_name: str | None = Field(default=None, min_length=1, max_length=255)
    passcode: str | None = Field(default=None, min_length=1, max_length=64)
    start_date: date | None = None
    launch_date: date | None = None
    current_phase: int | None = Field(default=None, ge=0, le=4)


class ClientProjectResponse(BaseModel):
    """Project as the client sees it: no passcode."""

    id: str
    client_name: str
    project_name: str
    start_date: date | None = None
    launch_date: date | None = None
    current_phase: int
    onboarding_completed: bool
    onboarding_completed_at: datetime | None = None
    created_at: datetime | None = None


class ProjectResponse(ClientProjectResponse):
    passcode: str


class TaskResponse(BaseModel):
    id: str
    phase_id: str
    name: str
    completed: bool
    task_order: int


class CommentResponse(BaseModel):
    id: str
    deliverable_id: str
    project_id: str
    user_type: UserType
    user_name: str
    message: str
    created_at: datetime | None = None


class FileResponse(BaseModel):
    id: str
    project_id: str
    deliverable_id: str | None = None
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    uploaded_by: UserType
    created_at: datetime | None = None


class DeliverableResponse(BaseModel):
    id: str
    phase_id: str
    name: str
    status: DeliverableStatus
    file_url: str | None = None
    comments: list[CommentResponse] = Field(default_factory=list)
    files: list[FileResponse] = Field(default_factory=list)


class PhaseResponse(BaseModel):
    id: str
    project_id: str
    phase_order: int
    name: str
    status: PhaseStatus
    completion: int
    next_steps: str
    tasks: list[TaskResponse] = Field(default_factory=list)
    deliverables: list[DeliverableResponse] = Field(default_factory=list)


class PortalTreeResponse(BaseModel):
    """A project with its full phase/task/deliverable/comment/file tree, client view."""

    project: ClientProjectResponse
    phases: list[PhaseResponse]
    files: list[FileResponse] = Field(default_factory=list)


class ProjectTreeResponse(PortalTreeResponse):
    """Admin view of the tree, passcode included."""

    project: ProjectResponse


class DuplicateProjectResponse(BaseModel):
    project_id: str


class TaskCompletionRequest(BaseModel):
    completed: bool


class TaskCompletionResponse(BaseModel):
    task: TaskResponse
    phase_completion: int | None = None


class PhaseCompletionRequest(BaseModel):
    completion: int = Field(..., ge=0, le=100)


class NextStepsRequest(BaseModel):
    next_steps: str


class PhaseStatusRequest(BaseModel):
    status: PhaseStatus


class DeliverableStatusRequest(BaseModel):
    status: DeliverableStatus


class CommentCreateRequest(BaseModel):
    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def reject_whitespace_only(cls, v: str) -> str:
        return _strip_required(v)

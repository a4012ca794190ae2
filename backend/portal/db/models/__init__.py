"""Re-export all models so Base.metadata sees them."""

from portal.db.models.admin_user import AdminUser
from portal.db.models.comment import Comment
from portal.db.models.deliverable import Deliverable
from portal.db.models.onboarding_response import OnboardingResponse
from portal.db.models.phase import Phase
from portal.db.models.project import Project
from portal.db.models.project_file import ProjectFile
from portal.db.models.task import Task

__all__ = [
    "AdminUser",
    "Comment",
    "Deliverable",
    "OnboardingResponse",
    "Phase",
    "Project",
    "ProjectFile",
    "Task",
]

"""DeliverableService: deliverable status and the comment thread under it."""

import structlog

from portal.core.exceptions import InvalidInputError, NotFoundError
from portal.domain.phases import DeliverableStatus, UserType
from portal.gateway.protocol import PersistenceGateway, Record

logger = structlog.get_logger(__name__)

ADMIN_DISPLAY_NAME = "Team"


class DeliverableService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def project_id_for(self, deliverable_id: str) -> str:
        """Id of the project a deliverable belongs to (through its phase)."""
        deliverable = await self.gateway.select_one("deliverables", {"id": deliverable_id})
        phase = await self.gateway.select_one("phases", {"id": deliverable["phase_id"]})
        return phase["project_id"]

    async def get_owned_deliverable(self, project_id: str, deliverable_id: str) -> Record:
        """Fetch a deliverable, checking it belongs to the given project.

        Raises:
            NotFoundError: If the deliverable is missing or sits under another project
        """
        deliverable = await self.gateway.select_one("deliverables", {"id": deliverable_id})
        phase = await self.gateway.select_one("phases", {"id": deliverable["phase_id"]})
        if phase["project_id"] != project_id:
            raise NotFoundError("deliverables", deliverable_id)
        return deliverable

    async def set_status(self, deliverable_id: str, status: str) -> Record:
        """Raises InvalidInputError for a status outside the deliverable lifecycle."""
        try:
            value = DeliverableStatus(status).value
        except ValueError as exc:
            raise InvalidInputError(f"Invalid deliverable status: {status}") from exc
        deliverable = await self.gateway.update("deliverables", deliverable_id, {"status": value})
        logger.info("deliverable_status_set", deliverable_id=deliverable_id, status=value)
        return deliverable

    async def add_comment(self, project_id: str, deliverable_id: str, user_type: str, message: str) -> Record:
        """Append a comment to a deliverable's thread.

        Client comments are signed with the project's client name, admin
        comments with "Team". Comments are never edited or deleted.

        Raises:
            InvalidInputError: If the message is blank or user_type is unknown
            NotFoundError: If the project or deliverable does not exist
        """
        message = (message or "").strip()
        if not message:
            raise InvalidInputError("Comment message cannot be empty")
        try:
            author = UserType(user_type)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid user_type: {user_type}") from exc

        project = await self.gateway.select_one("projects", {"id": project_id})
        await self.get_owned_deliverable(project_id, deliverable_id)

        user_name = project["client_name"] if author is UserType.CLIENT else ADMIN_DISPLAY_NAME
        comment = await self.gateway.insert(
            "comments",
            {
                "deliverable_id": deliverable_id,
                "project_id": project_id,
                "user_type": author.value,
                "user_name": user_name,
                "message": message,
            },
        )
        logger.info("comment_added", project_id=project_id, deliverable_id=deliverable_id, user_type=author.value)
        return comment

    async def list_comments(self, deliverable_id: str) -> list[Record]:
        """Oldest first."""
        return await self.gateway.select_many("comments", {"deliverable_id": deliverable_id}, order_by="created_at")

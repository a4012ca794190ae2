"""FileService: project attachments in object storage.

The blob goes to the project-files bucket first; only then is a `files` row
written pointing at its public URL. A failed row insert leaves the blob
orphaned in storage.
"""

import structlog

from portal.core.exceptions import InvalidInputError
from portal.domain.phases import UserType
from portal.domain.uploads import project_file_path
from portal.gateway.protocol import PersistenceGateway, Record
from portal.services.deliverable_service import DeliverableService

logger = structlog.get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileService:
    def __init__(self, gateway: PersistenceGateway, bucket: str, max_upload_bytes: int):
        self.gateway = gateway
        self.bucket = bucket
        self.max_upload_bytes = max_upload_bytes

    async def upload_file(
        self,
        project_id: str,
        file_name: str,
        data: bytes,
        content_type: str | None,
        uploaded_by: str,
        deliverable_id: str | None = None,
    ) -> Record:
        """Store an uploaded file and record its metadata.

        Raises:
            InvalidInputError: If the file is empty, too large, unnamed, or uploaded_by is unknown
            NotFoundError: If the project (or given deliverable) does not exist
            GatewayError: If the upload or the row insert fails
        """
        if not file_name:
            raise InvalidInputError("file_name is required")
        if not data:
            raise InvalidInputError("File is empty")
        if len(data) > self.max_upload_bytes:
            raise InvalidInputError(f"File exceeds the {self.max_upload_bytes} byte upload limit")
        try:
            uploader = UserType(uploaded_by)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid uploaded_by: {uploaded_by}") from exc

        await self.gateway.select_one("projects", {"id": project_id})
        if deliverable_id is not None:
            await DeliverableService(self.gateway).get_owned_deliverable(project_id, deliverable_id)

        content_type = content_type or DEFAULT_CONTENT_TYPE
        path = project_file_path(project_id, file_name)
        await self.gateway.upload_blob(self.bucket, path, data, content_type)
        url = self.gateway.get_public_url(self.bucket, path)

        record = await self.gateway.insert(
            "files",
            {
                "project_id": project_id,
                "deliverable_id": deliverable_id,
                "file_name": file_name,
                "file_url": url,
                "file_type": content_type,
                "file_size": len(data),
                "uploaded_by": uploader.value,
            },
        )
        logger.info(
            "file_uploaded",
            project_id=project_id,
            deliverable_id=deliverable_id,
            path=path,
            size=len(data),
        )
        return record

    async def list_files(self, project_id: str, deliverable_id: str | None = None) -> list[Record]:
        filters = {"project_id": project_id}
        if deliverable_id is not None:
            filters["deliverable_id"] = deliverable_id
        return await self.gateway.select_many("files", filters, order_by="created_at")

"""OnboardingCapture: questionnaire submissions and their read side.

Responsibilities:
- Submit: append one response document, then flag the project as onboarded
- Read: latest response, rendered sections, raw export
- Asset uploads for the brand assets step (brand guides, logos, fonts, media)

Submission is two independent writes with no transaction. If the flag
update fails the response row is still stored; the client is shown the form
again and may submit twice.
"""

from datetime import datetime, timezone
from typing import Any

import structlog

from portal.core.exceptions import GatewayError, InvalidInputError, NotFoundError, PartialSequenceError
from portal.domain.questionnaire import RenderedSection, render_document
from portal.domain.uploads import ASSET_KINDS, onboarding_asset_path
from portal.gateway.protocol import PersistenceGateway, Record
from portal.schemas.onboarding import OnboardingResponseV1

logger = structlog.get_logger(__name__)

SEQUENCE = "submit_onboarding"


class OnboardingCapture:
    """Service layer for client onboarding."""

    def __init__(self, gateway: PersistenceGateway, assets_bucket: str, max_upload_bytes: int):
        self.gateway = gateway
        self.assets_bucket = assets_bucket
        self.max_upload_bytes = max_upload_bytes

    async def submit(self, project_id: str, response: OnboardingResponseV1) -> Record:
        """Store a questionnaire submission and mark the project onboarded.

        Returns:
            The stored onboarding_responses row

        Raises:
            NotFoundError: If the project does not exist
            GatewayError: If the response insert fails (nothing written)
            PartialSequenceError: If the project flag update fails after the response was stored
        """
        await self.gateway.select_one("projects", {"id": project_id})

        submitted_at = datetime.now(timezone.utc)
        row = await self.gateway.insert(
            "onboarding_responses",
            {
                "project_id": project_id,
                "response_data": response.to_document(),
                "submitted_at": submitted_at,
            },
        )
        logger.info("onboarding_response_stored", project_id=project_id, response_id=row["id"])

        try:
            await self.gateway.update(
                "projects",
                project_id,
                {"onboarding_completed": True, "onboarding_completed_at": submitted_at},
            )
        except GatewayError as exc:
            logger.error(
                "onboarding_flag_failed",
                project_id=project_id,
                response_id=row["id"],
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PartialSequenceError(SEQUENCE, "project_flag", ["response"], exc, result_id=row["id"]) from exc

        logger.info("onboarding_submitted", project_id=project_id, response_id=row["id"])
        return row

    async def latest_response(self, project_id: str) -> Record | None:
        """Most recent submission for a project, or None if there is none."""
        rows = await self.gateway.select_many(
            "onboarding_responses",
            {"project_id": project_id},
            order_by="submitted_at",
            descending=True,
            limit=1,
        )
        return rows[0] if rows else None

    async def _require_latest(self, project_id: str) -> Record:
        row = await self.latest_response(project_id)
        if row is None:
            raise NotFoundError("onboarding_responses", project_id)
        return row

    @staticmethod
    def render_response(response: Record) -> list[RenderedSection]:
        """Render a stored response row into questionnaire sections."""
        return render_document(response.get("response_data") or {})

    async def render_latest(self, project_id: str) -> tuple[Record, list[RenderedSection]]:
        """Latest response and its rendered sections.

        Raises:
            NotFoundError: If the project has no submission
        """
        row = await self._require_latest(project_id)
        return row, self.render_response(row)

    async def export_response(self, project_id: str) -> dict[str, Any]:
        """Raw document of the latest submission, for download.

        Raises:
            NotFoundError: If the project has no submission
        """
        row = await self._require_latest(project_id)
        return row["response_data"]

    async def upload_asset(
        self,
        project_id: str,
        kind: str,
        file_name: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Upload one brand asset and return its public URL.

        The URL is not written anywhere; the client adds it to `{kind}_urls`
        in the document it submits.

        Raises:
            InvalidInputError: If kind is unknown or the file is empty or too large
            NotFoundError: If the project does not exist
            GatewayError: If the upload fails
        """
        if kind not in ASSET_KINDS:
            raise InvalidInputError(f"Invalid asset kind: {kind}. Must be one of {list(ASSET_KINDS)}.")
        if not file_name:
            raise InvalidInputError("file_name is required")
        if not data:
            raise InvalidInputError("File is empty")
        if len(data) > self.max_upload_bytes:
            raise InvalidInputError(f"File exceeds the {self.max_upload_bytes} byte upload limit")

        await self.gateway.select_one("projects", {"id": project_id})

        path = onboarding_asset_path(project_id, kind, file_name)
        await self.gateway.upload_blob(self.assets_bucket, path, data, content_type)
        url = self.gateway.get_public_url(self.assets_bucket, path)
        logger.info("onboarding_asset_uploaded", project_id=project_id, kind=kind, path=path, size=len(data))
        return url

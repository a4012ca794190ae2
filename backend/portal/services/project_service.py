"""ProjectService: project lifecycle for the admin dashboard.

Responsibilities:
- Create a project and seed its five template phases with default tasks/deliverables
- List projects and read one project's full tree (phases, tasks, deliverables,
  comments, files), fetched phase by phase
- Edit project fields, phase next steps and phase status
- Delete a project together with every row that hangs off it
"""

from collections.abc import Callable
from datetime import date
from typing import Any

import structlog

from portal.core.exceptions import GatewayError, InvalidInputError, PartialSequenceError
from portal.domain.passcodes import generate_passcode, normalize_passcode
from portal.domain.phases import DeliverableStatus, PhaseStatus, initial_phase_status, validate_phase_index
from portal.domain.templates import PHASE_TEMPLATES, get_phase_template
from portal.gateway.protocol import PersistenceGateway, Record

logger = structlog.get_logger(__name__)

MAX_PASSCODE_ATTEMPTS = 5
EDITABLE_PROJECT_FIELDS = {"client_name", "project_name", "passcode", "start_date", "launch_date", "current_phase"}


async def passcode_taken(gateway: PersistenceGateway, passcode: str, exclude_id: str | None = None) -> bool:
    matches = await gateway.select_many("projects", {"passcode": passcode})
    return any(p["id"] != exclude_id for p in matches)


async def unused_passcode(
    gateway: PersistenceGateway, passcode_factory: Callable[[], str] = generate_passcode
) -> str:
    """Draw passcodes until one is not held by any project.

    Raises:
        InvalidInputError: If MAX_PASSCODE_ATTEMPTS draws all collide
    """
    for _ in range(MAX_PASSCODE_ATTEMPTS):
        candidate = passcode_factory()
        if not await passcode_taken(gateway, candidate):
            return candidate
    raise InvalidInputError("Could not generate an unused passcode")


class ProjectService:
    """Service layer for projects and their phase trees."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_project(
        self,
        client_name: str,
        project_name: str,
        passcode: str | None = None,
        start_date: date | None = None,
        launch_date: date | None = None,
    ) -> Record:
        """Create a project and seed it from the phase templates.

        The project row is written first, then for each template phase the
        phase row, its tasks and its deliverables. Nothing is rolled back if a
        later write fails.

        Raises:
            InvalidInputError: If a name is blank or the passcode is already taken
            GatewayError: If the project insert fails
            PartialSequenceError: If seeding fails after the project row exists
        """
        client_name = client_name.strip()
        project_name = project_name.strip()
        if not client_name or not project_name:
            raise InvalidInputError("client_name and project_name are required")

        if passcode is not None and passcode.strip():
            passcode = normalize_passcode(passcode)
            if await self._passcode_taken(passcode):
                raise InvalidInputError(f"Passcode already in use: {passcode}")
        else:
            passcode = await self._unused_passcode()

        project = await self.gateway.insert(
            "projects",
            {
                "client_name": client_name,
                "project_name": project_name,
                "passcode": passcode,
                "start_date": start_date,
                "launch_date": launch_date,
                "current_phase": 0,
            },
        )
        await self._seed_phases(project["id"])
        logger.info("project_created", project_id=project["id"], project_name=project_name)
        return project

    async def _seed_phases(self, project_id: str) -> None:
        committed = ["project"]
        step = "project"
        try:
            for order in range(len(PHASE_TEMPLATES)):
                template = get_phase_template(order)

                step = f"phase[{order}]"
                phase = await self.gateway.insert(
                    "phases",
                    {
                        "project_id": project_id,
                        "phase_order": order,
                        "name": template["name"],
                        "status": initial_phase_status(order).value,
                        "completion": 0,
                        "next_steps": template["next_steps"],
                    },
                )
                committed.append(step)

                step = f"tasks[{order}]"
                await self.gateway.insert_many(
                    "tasks",
                    [
                        {"phase_id": phase["id"], "name": name, "completed": False, "task_order": i}
                        for i, name in enumerate(template["tasks"])
                    ],
                )
                committed.append(step)

                step = f"deliverables[{order}]"
                await self.gateway.insert_many(
                    "deliverables",
                    [
                        {"phase_id": phase["id"], "name": name, "status": DeliverableStatus.NOT_STARTED.value}
                        for name in template["deliverables"]
                    ],
                )
                committed.append(step)
        except GatewayError as exc:
            logger.error(
                "project_seed_failed",
                project_id=project_id,
                step=step,
                committed=committed,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PartialSequenceError("create_project", step, committed, exc, result_id=project_id) from exc

    async def _passcode_taken(self, passcode: str, exclude_id: str | None = None) -> bool:
        return await passcode_taken(self.gateway, passcode, exclude_id)

    async def _unused_passcode(self) -> str:
        return await unused_passcode(self.gateway)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_projects(self) -> list[Record]:
        """All projects, newest first."""
        return await self.gateway.select_many("projects", order_by="created_at", descending=True)

    async def get_project(self, project_id: str) -> Record:
        return await self.gateway.select_one("projects", {"id": project_id})

    async def get_project_tree(self, project_id: str) -> dict[str, Any]:
        """Read a project with everything under it.

        Phases are read in phase_order and, for each one in turn, its tasks
        (by task_order) and deliverables, each deliverable with its comments
        (oldest first) and attached files.

        Returns:
            {"project": record, "phases": [phase + tasks + deliverables], "files": [project-level files]}

        Raises:
            NotFoundError: If the project does not exist
        """
        project = await self.get_project(project_id)
        phases = await self.gateway.select_many("phases", {"project_id": project_id}, order_by="phase_order")
        files = await self.gateway.select_many("files", {"project_id": project_id}, order_by="created_at")

        files_by_deliverable: dict[str | None, list[Record]] = {}
        for f in files:
            files_by_deliverable.setdefault(f["deliverable_id"], []).append(f)

        tree_phases = []
        for phase in phases:
            tasks = await self.gateway.select_many("tasks", {"phase_id": phase["id"]}, order_by="task_order")
            deliverables = await self.gateway.select_many("deliverables", {"phase_id": phase["id"]})
            for deliverable in deliverables:
                deliverable["comments"] = await self.gateway.select_many(
                    "comments", {"deliverable_id": deliverable["id"]}, order_by="created_at"
                )
                deliverable["files"] = files_by_deliverable.get(deliverable["id"], [])
            tree_phases.append({**phase, "tasks": tasks, "deliverables": deliverables})

        return {"project": project, "phases": tree_phases, "files": files_by_deliverable.get(None, [])}

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_project(self, project_id: str, patch: dict[str, Any]) -> Record:
        """Apply a partial update to a project's editable fields.

        Raises:
            InvalidInputError: On unknown fields, blank names, a current_phase outside 0-4,
                or a passcode used by another project
            NotFoundError: If the project does not exist
        """
        unknown = set(patch) - EDITABLE_PROJECT_FIELDS
        if unknown:
            raise InvalidInputError(f"Fields not editable: {sorted(unknown)}")

        patch = dict(patch)
        for name_field in ("client_name", "project_name"):
            if name_field in patch:
                patch[name_field] = (patch[name_field] or "").strip()
                if not patch[name_field]:
                    raise InvalidInputError(f"{name_field} cannot be empty")

        if "current_phase" in patch:
            try:
                validate_phase_index(patch["current_phase"])
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(str(exc)) from exc

        if "passcode" in patch:
            passcode = normalize_passcode(patch["passcode"] or "")
            if not passcode:
                raise InvalidInputError("passcode cannot be empty")
            if await self._passcode_taken(passcode, exclude_id=project_id):
                raise InvalidInputError(f"Passcode already in use: {passcode}")
            patch["passcode"] = passcode

        if not patch:
            return await self.get_project(project_id)

        project = await self.gateway.update("projects", project_id, patch)
        logger.info("project_updated", project_id=project_id, fields=sorted(patch))
        return project

    async def update_next_steps(self, phase_id: str, next_steps: str) -> Record:
        return await self.gateway.update("phases", phase_id, {"next_steps": next_steps})

    async def update_phase_status(self, phase_id: str, status: str) -> Record:
        """Raises InvalidInputError for a status outside upcoming/in-progress/complete."""
        try:
            value = PhaseStatus(status).value
        except ValueError as exc:
            raise InvalidInputError(f"Invalid phase status: {status}") from exc
        phase = await self.gateway.update("phases", phase_id, {"status": value})
        logger.info("phase_status_set", phase_id=phase_id, status=value)
        return phase

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_project(self, project_id: str) -> None:
        """Delete a project and, children first, every row beneath it.

        Order: files, comments, then per phase its deliverables and tasks,
        then phases, onboarding responses and finally the project row. Stored
        blobs are left in object storage.

        Raises:
            NotFoundError: If the project does not exist
        """
        await self.get_project(project_id)
        phases = await self.gateway.select_many("phases", {"project_id": project_id})

        await self.gateway.delete_many("files", {"project_id": project_id})
        await self.gateway.delete_many("comments", {"project_id": project_id})
        for phase in phases:
            await self.gateway.delete_many("deliverables", {"phase_id": phase["id"]})
            await self.gateway.delete_many("tasks", {"phase_id": phase["id"]})
        await self.gateway.delete_many("phases", {"project_id": project_id})
        await self.gateway.delete_many("onboarding_responses", {"project_id": project_id})
        await self.gateway.delete("projects", project_id)

        logger.info("project_deleted", project_id=project_id, phases=len(phases))

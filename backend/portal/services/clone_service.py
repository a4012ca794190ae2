"""ProjectCloner: copy a project's structure into a fresh project.

Strict order, one write at a time:
1. the project row (names suffixed " (Copy)", new passcode, current_phase 0)
2. per source phase by phase_order: the phase (completion 0, only the first in progress),
   then its tasks (unchecked), then its deliverables (not started, no file)

Comments and files are never copied. A failure after the project row exists
raises PartialSequenceError; the rows already written stay where they are.
"""

from collections.abc import Callable

import structlog

from portal.core.exceptions import GatewayError, PartialSequenceError
from portal.domain.passcodes import generate_passcode
from portal.domain.phases import DeliverableStatus, initial_phase_status
from portal.gateway.protocol import PersistenceGateway
from portal.services.project_service import unused_passcode

logger = structlog.get_logger(__name__)

COPY_SUFFIX = " (Copy)"
SEQUENCE = "duplicate_project"


class ProjectCloner:
    """Duplicates phase/task/deliverable structure, never progress."""

    def __init__(self, gateway: PersistenceGateway, passcode_factory: Callable[[], str] = generate_passcode):
        self.gateway = gateway
        self.passcode_factory = passcode_factory

    async def duplicate_project(self, source_project_id: str) -> str:
        """Clone a project and return the new project's id.

        Raises:
            NotFoundError: If the source project does not exist
            InvalidInputError: If no unused passcode could be drawn
            GatewayError: If the first insert fails (nothing was written)
            PartialSequenceError: If a later step fails; earlier steps remain committed
        """
        source = await self.gateway.select_one("projects", {"id": source_project_id})
        source_phases = await self.gateway.select_many(
            "phases", {"project_id": source_project_id}, order_by="phase_order"
        )

        passcode = await unused_passcode(self.gateway, self.passcode_factory)
        new_project = await self.gateway.insert(
            "projects",
            {
                "client_name": source["client_name"] + COPY_SUFFIX,
                "project_name": source["project_name"] + COPY_SUFFIX,
                "passcode": passcode,
                "start_date": source["start_date"],
                "launch_date": source["launch_date"],
                "current_phase": 0,
            },
        )
        new_id = new_project["id"]
        committed = ["project"]
        logger.info("clone_step_committed", sequence=SEQUENCE, step="project", project_id=new_id)

        step = "project"
        try:
            for phase in source_phases:
                order = phase["phase_order"]

                step = f"phase[{order}]"
                new_phase = await self.gateway.insert(
                    "phases",
                    {
                        "project_id": new_id,
                        "phase_order": order,
                        "name": phase["name"],
                        "status": initial_phase_status(order).value,
                        "completion": 0,
                        "next_steps": phase["next_steps"],
                    },
                )
                committed.append(step)

                step = f"tasks[{order}]"
                tasks = await self.gateway.select_many("tasks", {"phase_id": phase["id"]}, order_by="task_order")
                if tasks:
                    await self.gateway.insert_many(
                        "tasks",
                        [
                            {
                                "phase_id": new_phase["id"],
                                "name": t["name"],
                                "completed": False,
                                "task_order": t["task_order"],
                            }
                            for t in tasks
                        ],
                    )
                    committed.append(step)

                step = f"deliverables[{order}]"
                deliverables = await self.gateway.select_many("deliverables", {"phase_id": phase["id"]})
                if deliverables:
                    await self.gateway.insert_many(
                        "deliverables",
                        [
                            {
                                "phase_id": new_phase["id"],
                                "name": d["name"],
                                "status": DeliverableStatus.NOT_STARTED.value,
                                "file_url": None,
                            }
                            for d in deliverables
                        ],
                    )
                    committed.append(step)
        except GatewayError as exc:
            logger.error(
                "clone_failed",
                sequence=SEQUENCE,
                step=step,
                project_id=new_id,
                committed=committed,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PartialSequenceError(SEQUENCE, step, committed, exc, result_id=new_id) from exc

        logger.info(
            "project_duplicated",
            source_project_id=source_project_id,
            project_id=new_id,
            phases=len(source_phases),
        )
        return new_id

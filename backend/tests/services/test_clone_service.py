"""Tests for ProjectCloner: structural copy, no progress, no rollback."""
import re

import pytest

from portal.core.exceptions import GatewayError, InvalidInputError, NotFoundError, PartialSequenceError
from portal.services.clone_service import ProjectCloner
from portal.services.completion_service import CompletionEngine
from portal.services.deliverable_service import DeliverableService

pytestmark = pytest.mark.unit

GENERATED = re.compile(r"^[ABCDEFGHJKLMNPQRSTUVWXYZ23456789]{4}-[ABCDEFGHJKLMNPQRSTUVWXYZ23456789]{4}$")


@pytest.fixture
def cloner(gateway):
    return ProjectCloner(gateway)


async def _tree(gateway, project_id):
    phases = await gateway.select_many("phases", {"project_id": project_id}, order_by="phase_order")
    out = []
    for phase in phases:
        tasks = await gateway.select_many("tasks", {"phase_id": phase["id"]}, order_by="task_order")
        deliverables = await gateway.select_many("deliverables", {"phase_id": phase["id"]})
        out.append((phase, tasks, deliverables))
    return out


@pytest.fixture
async def worked_project(gateway, acme_project):
    """The seeded project after some real work: checked tasks, progress, comments, files."""
    tree = await _tree(gateway, acme_project["id"])
    discovery, tasks, deliverables = tree[0]

    engine = CompletionEngine(gateway)
    await engine.set_task_completion(tasks[0]["id"], True)
    await engine.set_task_completion(tasks[1]["id"], True)
    await gateway.update("phases", discovery["id"], {"status": "complete"})
    await gateway.update("deliverables", deliverables[0]["id"], {"status": "delivered", "file_url": "memory://x"})
    await gateway.update("projects", acme_project["id"], {"current_phase": 2})

    await DeliverableService(gateway).add_comment(acme_project["id"], deliverables[0]["id"], "client", "Looks good")
    await gateway.insert(
        "files",
        {
            "project_id": acme_project["id"],
            "deliverable_id": deliverables[0]["id"],
            "file_name": "contract.pdf",
            "file_url": "memory://project-files/contract.pdf",
            "uploaded_by": "admin",
        },
    )
    return acme_project


class TestDuplicateProject:
    async def test_acme_copy_names_and_passcode(self, cloner, gateway, worked_project):
        new_id = await cloner.duplicate_project(worked_project["id"])
        copy = await gateway.select_one("projects", {"id": new_id})

        assert copy["project_name"] == "Acme Site (Copy)"
        assert copy["client_name"] == "Acme Corp (Copy)"
        assert copy["passcode"] != "WXYZ-1234"
        assert GENERATED.match(copy["passcode"])

    async def test_dates_copied_and_phase_reset(self, cloner, gateway, worked_project):
        new_id = await cloner.duplicate_project(worked_project["id"])
        copy = await gateway.select_one("projects", {"id": new_id})

        assert copy["start_date"] == worked_project["start_date"]
        assert copy["launch_date"] == worked_project["launch_date"]
        assert copy["current_phase"] == 0
        assert copy["onboarding_completed"] is False

    async def test_structure_is_isomorphic(self, cloner, gateway, worked_project):
        source = await _tree(gateway, worked_project["id"])
        new_id = await cloner.duplicate_project(worked_project["id"])
        clone = await _tree(gateway, new_id)

        assert [p["phase_order"] for p, _, _ in clone] == [p["phase_order"] for p, _, _ in source]
        for (sp, st, sd), (cp, ct, cd) in zip(source, clone):
            assert cp["name"] == sp["name"]
            assert cp["next_steps"] == sp["next_steps"]
            assert [(t["name"], t["task_order"]) for t in ct] == [(t["name"], t["task_order"]) for t in st]
            assert [d["name"] for d in cd] == [d["name"] for d in sd]

    async def test_progress_is_never_copied(self, cloner, gateway, worked_project):
        new_id = await cloner.duplicate_project(worked_project["id"])
        clone = await _tree(gateway, new_id)

        for phase, tasks, deliverables in clone:
            assert phase["completion"] == 0
            expected = "in-progress" if phase["phase_order"] == 0 else "upcoming"
            assert phase["status"] == expected
            assert all(t["completed"] is False for t in tasks)
            assert all(d["status"] == "not-started" for d in deliverables)
            assert all(d["file_url"] is None for d in deliverables)

    async def test_comments_and_files_are_not_copied(self, cloner, gateway, worked_project):
        new_id = await cloner.duplicate_project(worked_project["id"])
        clone = await _tree(gateway, new_id)
        clone_deliverable_ids = {d["id"] for _, _, ds in clone for d in ds}

        assert await gateway.select_many("comments", {"project_id": new_id}) == []
        assert await gateway.select_many("files", {"project_id": new_id}) == []
        for comment in await gateway.select_many("comments"):
            assert comment["deliverable_id"] not in clone_deliverable_ids

    async def test_source_is_untouched(self, cloner, gateway, worked_project):
        before = await _tree(gateway, worked_project["id"])
        await cloner.duplicate_project(worked_project["id"])
        assert await _tree(gateway, worked_project["id"]) == before

    async def test_step_order(self, cloner, gateway, worked_project):
        """Project first, then per phase: phase, tasks, deliverables."""
        gateway.calls.clear()
        await cloner.duplicate_project(worked_project["id"])
        writes = [c for c in gateway.calls if c[0].startswith("insert")]
        assert writes[0] == ("insert", "projects")
        assert writes[1:4] == [("insert", "phases"), ("insert_many", "tasks"), ("insert_many", "deliverables")]
        assert len(writes) == 1 + 5 * 3

    async def test_passcode_factory_is_injectable(self, gateway, worked_project):
        cloner = ProjectCloner(gateway, passcode_factory=lambda: "ABCD-EFGH")
        new_id = await cloner.duplicate_project(worked_project["id"])
        assert (await gateway.select_one("projects", {"id": new_id}))["passcode"] == "ABCD-EFGH"

    async def test_passcode_collision_is_redrawn(self, gateway, worked_project):
        draws = iter([worked_project["passcode"], "ABCD-EFGH"])
        cloner = ProjectCloner(gateway, passcode_factory=lambda: next(draws))
        new_id = await cloner.duplicate_project(worked_project["id"])
        assert (await gateway.select_one("projects", {"id": new_id}))["passcode"] == "ABCD-EFGH"

    async def test_gives_up_when_every_draw_collides(self, gateway, worked_project):
        cloner = ProjectCloner(gateway, passcode_factory=lambda: worked_project["passcode"])
        with pytest.raises(InvalidInputError):
            await cloner.duplicate_project(worked_project["id"])
        assert len(gateway.tables["projects"]) == 1

    async def test_unknown_source_raises_not_found(self, cloner, gateway):
        with pytest.raises(NotFoundError):
            await cloner.duplicate_project("missing")
        assert gateway.tables["projects"] == {}


class TestPartialFailure:
    async def test_first_insert_failure_writes_nothing(self, cloner, gateway, worked_project):
        gateway.fail("insert", "projects")
        with pytest.raises(GatewayError) as excinfo:
            await cloner.duplicate_project(worked_project["id"])
        assert not isinstance(excinfo.value, PartialSequenceError)
        assert len(gateway.tables["projects"]) == 1

    async def test_failure_midway_keeps_committed_rows(self, cloner, gateway, worked_project):
        """Third phase insert fails: project and first two phases (with children) remain."""
        gateway.fail("insert", "phases", after=2)

        with pytest.raises(PartialSequenceError) as excinfo:
            await cloner.duplicate_project(worked_project["id"])

        err = excinfo.value
        assert err.failed_step == "phase[2]"
        assert err.committed == [
            "project",
            "phase[0]",
            "tasks[0]",
            "deliverables[0]",
            "phase[1]",
            "tasks[1]",
            "deliverables[1]",
        ]
        orphan = await gateway.select_one("projects", {"id": err.result_id})
        assert orphan["project_name"] == "Acme Site (Copy)"
        phases = await gateway.select_many("phases", {"project_id": err.result_id})
        assert len(phases) == 2

    async def test_task_insert_failure(self, cloner, gateway, worked_project):
        gateway.fail("insert_many", "tasks")
        with pytest.raises(PartialSequenceError) as excinfo:
            await cloner.duplicate_project(worked_project["id"])
        assert excinfo.value.failed_step == "tasks[0]"
        assert excinfo.value.committed == ["project", "phase[0]"]

    async def test_partial_error_is_a_gateway_error(self, cloner, gateway, worked_project):
        gateway.fail("insert_many", "deliverables", after=4)
        with pytest.raises(GatewayError):
            await cloner.duplicate_project(worked_project["id"])

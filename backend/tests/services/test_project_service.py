"""Tests for ProjectService: creation and seeding, tree reads, edits, cascade delete."""
import re
from datetime import date, datetime, timedelta, timezone

import pytest

from portal.core.exceptions import GatewayError, InvalidInputError, NotFoundError, PartialSequenceError
from portal.services.deliverable_service import DeliverableService
from portal.services.file_service import FileService
from portal.services.onboarding_service import OnboardingCapture
from portal.schemas.onboarding import OnboardingResponseV1

pytestmark = pytest.mark.unit

GENERATED = re.compile(r"^[A-HJ-NP-Z2-9]{4}-[A-HJ-NP-Z2-9]{4}$")


class TestCreateProject:
    async def test_seeds_five_phases(self, gateway, acme_project):
        phases = await gateway.select_many("phases", {"project_id": acme_project["id"]}, order_by="phase_order")
        assert [p["name"] for p in phases] == ["Discovery", "Strategy", "Design", "Development", "Launch"]
        assert [p["status"] for p in phases] == ["in-progress", "upcoming", "upcoming", "upcoming", "upcoming"]
        assert all(p["completion"] == 0 for p in phases)
        assert all(p["next_steps"] for p in phases)

    async def test_seeded_task_and_deliverable_counts(self, gateway, acme_project):
        phases = await gateway.select_many("phases", {"project_id": acme_project["id"]}, order_by="phase_order")
        task_counts = []
        deliverable_counts = []
        for phase in phases:
            tasks = await gateway.select_many("tasks", {"phase_id": phase["id"]}, order_by="task_order")
            deliverables = await gateway.select_many("deliverables", {"phase_id": phase["id"]})
            assert [t["task_order"] for t in tasks] == list(range(len(tasks)))
            assert all(t["completed"] is False for t in tasks)
            assert all(d["status"] == "not-started" for d in deliverables)
            task_counts.append(len(tasks))
            deliverable_counts.append(len(deliverables))

        assert task_counts == [5, 4, 6, 6, 5]
        assert deliverable_counts == [2, 2, 4, 2, 2]

    async def test_project_fields(self, acme_project):
        assert acme_project["client_name"] == "Acme Corp"
        assert acme_project["project_name"] == "Acme Site"
        assert acme_project["passcode"] == "WXYZ-1234"
        assert acme_project["current_phase"] == 0
        assert acme_project["onboarding_completed"] is False
        assert acme_project["start_date"] == date(2025, 1, 6)

    async def test_names_are_stripped(self, project_service):
        project = await project_service.create_project("  Globex ", " Portal  ")
        assert project["client_name"] == "Globex"
        assert project["project_name"] == "Portal"

    async def test_blank_name_rejected_before_writes(self, project_service, gateway):
        with pytest.raises(InvalidInputError):
            await project_service.create_project("   ", "Portal")
        assert gateway.calls == []

    async def test_passcode_is_uppercased(self, project_service):
        project = await project_service.create_project("Globex", "Portal", passcode=" abcd-efgh ")
        assert project["passcode"] == "ABCD-EFGH"

    async def test_duplicate_passcode_rejected(self, project_service, acme_project):
        with pytest.raises(InvalidInputError, match="already in use"):
            await project_service.create_project("Globex", "Portal", passcode="wxyz-1234")

    async def test_generated_passcode(self, project_service):
        project = await project_service.create_project("Globex", "Portal")
        assert GENERATED.match(project["passcode"])

    async def test_seed_failure_keeps_project_row(self, project_service, gateway):
        gateway.fail("insert_many", "deliverables", after=1)
        with pytest.raises(PartialSequenceError) as excinfo:
            await project_service.create_project("Globex", "Portal")

        err = excinfo.value
        assert err.sequence == "create_project"
        assert err.failed_step == "deliverables[1]"
        assert err.committed == ["project", "phase[0]", "tasks[0]", "deliverables[0]", "phase[1]", "tasks[1]"]
        assert (await gateway.select_one("projects", {"id": err.result_id}))["project_name"] == "Portal"

    async def test_project_insert_failure_is_plain_gateway_error(self, project_service, gateway):
        gateway.fail("insert", "projects")
        with pytest.raises(GatewayError) as excinfo:
            await project_service.create_project("Globex", "Portal")
        assert not isinstance(excinfo.value, PartialSequenceError)
        assert gateway.tables["phases"] == {}


class TestReadProjects:
    async def test_list_newest_first(self, project_service, gateway, acme_project):
        second = await project_service.create_project("Globex", "Portal")
        gateway.tables["projects"][acme_project["id"]]["created_at"] = datetime.now(timezone.utc) - timedelta(days=1)

        projects = await project_service.list_projects()
        assert [p["id"] for p in projects] == [second["id"], acme_project["id"]]

    async def test_get_unknown_project(self, project_service):
        with pytest.raises(NotFoundError):
            await project_service.get_project("missing")

    async def test_tree_shape(self, project_service, gateway, acme_project):
        phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 0})
        deliverable = (await gateway.select_many("deliverables", {"phase_id": phase["id"]}))[0]
        await DeliverableService(gateway).add_comment(acme_project["id"], deliverable["id"], "admin", "First draft")
        files = FileService(gateway, "project-files", 1024)
        await files.upload_file(acme_project["id"], "brief.pdf", b"%PDF", "application/pdf", "admin")
        await files.upload_file(
            acme_project["id"], "wire.png", b"png", "image/png", "admin", deliverable_id=deliverable["id"]
        )

        tree = await project_service.get_project_tree(acme_project["id"])

        assert tree["project"]["id"] == acme_project["id"]
        assert [p["phase_order"] for p in tree["phases"]] == [0, 1, 2, 3, 4]
        first = tree["phases"][0]
        assert len(first["tasks"]) == 5
        tree_deliverable = next(d for d in first["deliverables"] if d["id"] == deliverable["id"])
        assert [c["message"] for c in tree_deliverable["comments"]] == ["First draft"]
        assert [f["file_name"] for f in tree_deliverable["files"]] == ["wire.png"]
        assert [f["file_name"] for f in tree["files"]] == ["brief.pdf"]

    async def test_tree_of_unknown_project(self, project_service):
        with pytest.raises(NotFoundError):
            await project_service.get_project_tree("missing")


class TestUpdateProject:
    async def test_partial_update(self, project_service, acme_project):
        updated = await project_service.update_project(
            acme_project["id"], {"project_name": " Acme Relaunch ", "current_phase": 2}
        )
        assert updated["project_name"] == "Acme Relaunch"
        assert updated["current_phase"] == 2
        assert updated["client_name"] == "Acme Corp"

    @pytest.mark.parametrize(
        "patch",
        [
            {"current_phase": 5},
            {"current_phase": -1},
            {"client_name": "  "},
            {"passcode": ""},
            {"onboarding_completed": True},
        ],
    )
    async def test_rejects_bad_patch(self, project_service, gateway, acme_project, patch):
        gateway.calls.clear()
        with pytest.raises(InvalidInputError):
            await project_service.update_project(acme_project["id"], patch)
        assert ("update", "projects") not in gateway.calls

    async def test_passcode_kept_on_same_project(self, project_service, acme_project):
        updated = await project_service.update_project(acme_project["id"], {"passcode": "wxyz-1234"})
        assert updated["passcode"] == "WXYZ-1234"

    async def test_passcode_taken_by_other_project(self, project_service, acme_project):
        other = await project_service.create_project("Globex", "Portal")
        with pytest.raises(InvalidInputError, match="already in use"):
            await project_service.update_project(other["id"], {"passcode": "WXYZ-1234"})

    async def test_empty_patch_returns_project(self, project_service, gateway, acme_project):
        gateway.calls.clear()
        project = await project_service.update_project(acme_project["id"], {})
        assert project["id"] == acme_project["id"]
        assert ("update", "projects") not in gateway.calls

    async def test_update_unknown_project(self, project_service):
        with pytest.raises(NotFoundError):
            await project_service.update_project("missing", {"project_name": "X"})


class TestPhaseEdits:
    async def test_next_steps(self, project_service, gateway, acme_project):
        phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 1})
        updated = await project_service.update_next_steps(phase["id"], "Send moodboard")
        assert updated["next_steps"] == "Send moodboard"

    async def test_phase_status(self, project_service, gateway, acme_project):
        phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 0})
        updated = await project_service.update_phase_status(phase["id"], "complete")
        assert updated["status"] == "complete"

    async def test_bad_phase_status(self, project_service, gateway, acme_project):
        phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 0})
        with pytest.raises(InvalidInputError):
            await project_service.update_phase_status(phase["id"], "done")


class TestDeleteProject:
    async def test_cascade_leaves_no_orphans(self, project_service, gateway, acme_project):
        other = await project_service.create_project("Globex", "Portal")
        phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 0})
        deliverable = (await gateway.select_many("deliverables", {"phase_id": phase["id"]}))[0]
        await DeliverableService(gateway).add_comment(acme_project["id"], deliverable["id"], "client", "Hi")
        await FileService(gateway, "project-files", 1024).upload_file(
            acme_project["id"], "a.txt", b"a", "text/plain", "client"
        )
        await OnboardingCapture(gateway, "onboarding-assets", 1024).submit(
            acme_project["id"], OnboardingResponseV1(company_name="Acme")
        )

        await project_service.delete_project(acme_project["id"])

        assert list(gateway.tables["projects"]) == [other["id"]]
        remaining_phase_ids = {p["id"] for p in gateway.tables["phases"].values()}
        assert all(p["project_id"] == other["id"] for p in gateway.tables["phases"].values())
        assert all(t["phase_id"] in remaining_phase_ids for t in gateway.tables["tasks"].values())
        assert all(d["phase_id"] in remaining_phase_ids for d in gateway.tables["deliverables"].values())
        assert gateway.tables["comments"] == {}
        assert gateway.tables["files"] == {}
        assert gateway.tables["onboarding_responses"] == {}

    async def test_uploaded_blobs_are_left_in_place(self, project_service, gateway, acme_project):
        await FileService(gateway, "project-files", 1024).upload_file(
            acme_project["id"], "a.txt", b"a", "text/plain", "client"
        )
        await project_service.delete_project(acme_project["id"])
        assert len(gateway.blobs) == 1

    async def test_children_deleted_before_project(self, project_service, gateway, acme_project):
        gateway.calls.clear()
        await project_service.delete_project(acme_project["id"])
        deletes = [c for c in gateway.calls if c[0].startswith("delete")]
        assert deletes[0] == ("delete_many", "files")
        assert deletes[-1] == ("delete", "projects")

    async def test_delete_unknown_project(self, project_service, gateway):
        with pytest.raises(NotFoundError):
            await project_service.delete_project("missing")

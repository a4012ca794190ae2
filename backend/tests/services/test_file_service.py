"""Tests for FileService: blob upload followed by the files row."""
import re

import pytest

from portal.core.exceptions import GatewayError, InvalidInputError, NotFoundError
from portal.services.file_service import FileService

pytestmark = pytest.mark.unit

BUCKET = "project-files"


@pytest.fixture
def files(gateway):
    return FileService(gateway, BUCKET, max_upload_bytes=2048)


@pytest.fixture
async def style_guide(gateway, acme_project):
    phase = await gateway.select_one("phases", {"project_id": acme_project["id"], "phase_order": 2})
    return await gateway.select_one("deliverables", {"phase_id": phase["id"], "name": "Style Guide"})


class TestUploadFile:
    async def test_project_level_upload(self, files, gateway, acme_project):
        record = await files.upload_file(acme_project["id"], "brief.pdf", b"%PDF-1.7", "application/pdf", "admin")

        ((bucket, path),) = gateway.blobs
        assert bucket == BUCKET
        assert re.fullmatch(rf"{acme_project['id']}/\d+-[a-z0-9]{{6}}\.pdf", path)
        assert record["file_url"] == gateway.get_public_url(BUCKET, path)
        assert record["file_name"] == "brief.pdf"
        assert record["file_type"] == "application/pdf"
        assert record["file_size"] == 8
        assert record["uploaded_by"] == "admin"
        assert record["deliverable_id"] is None

    async def test_attach_to_deliverable(self, files, acme_project, style_guide):
        record = await files.upload_file(
            acme_project["id"], "guide.pdf", b"x", None, "client", deliverable_id=style_guide["id"]
        )
        assert record["deliverable_id"] == style_guide["id"]
        assert record["file_type"] == "application/octet-stream"

    async def test_extensionless_name(self, files, gateway, acme_project):
        await files.upload_file(acme_project["id"], "README", b"x", "text/plain", "admin")
        ((_, path),) = gateway.blobs
        assert path.endswith(".README")

    @pytest.mark.parametrize(
        "file_name, data, uploaded_by",
        [("", b"x", "admin"), ("a.txt", b"", "admin"), ("a.txt", b"x" * 2049, "admin"), ("a.txt", b"x", "robot")],
    )
    async def test_rejects_bad_upload(self, files, gateway, acme_project, file_name, data, uploaded_by):
        with pytest.raises(InvalidInputError):
            await files.upload_file(acme_project["id"], file_name, data, "text/plain", uploaded_by)
        assert gateway.blobs == {}
        assert gateway.tables["files"] == {}

    async def test_deliverable_from_other_project(self, files, gateway, project_service, style_guide):
        other = await project_service.create_project("Globex", "Portal")
        with pytest.raises(NotFoundError):
            await files.upload_file(other["id"], "a.txt", b"x", None, "admin", deliverable_id=style_guide["id"])
        assert gateway.blobs == {}

    async def test_upload_failure_writes_no_row(self, files, gateway, acme_project):
        gateway.fail_uploads = True
        with pytest.raises(GatewayError):
            await files.upload_file(acme_project["id"], "a.txt", b"x", None, "admin")
        assert gateway.tables["files"] == {}

    async def test_row_failure_leaves_blob(self, files, gateway, acme_project):
        """Blob first, row second: a failed insert orphans the blob."""
        gateway.fail("insert", "files")
        with pytest.raises(GatewayError):
            await files.upload_file(acme_project["id"], "a.txt", b"x", None, "admin")
        assert len(gateway.blobs) == 1
        assert gateway.tables["files"] == {}


class TestListFiles:
    async def test_filters_by_deliverable(self, files, acme_project, style_guide):
        await files.upload_file(acme_project["id"], "a.txt", b"a", None, "admin")
        await files.upload_file(acme_project["id"], "b.txt", b"b", None, "admin", deliverable_id=style_guide["id"])

        assert [f["file_name"] for f in await files.list_files(acme_project["id"])] == ["a.txt", "b.txt"]
        only = await files.list_files(acme_project["id"], deliverable_id=style_guide["id"])
        assert [f["file_name"] for f in only] == ["b.txt"]

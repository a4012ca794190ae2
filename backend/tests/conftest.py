"""Shared test fixtures for all test groups."""

from datetime import date

import pytest

from portal.gateway.memory import InMemoryGateway
from portal.services.project_service import ProjectService


@pytest.fixture
def gateway():
    """Fresh in-memory gateway (records + blobs), no failures injected."""
    return InMemoryGateway()


@pytest.fixture
def project_service(gateway):
    return ProjectService(gateway)


@pytest.fixture
async def acme_project(project_service):
    """Seeded project "Acme Site" with passcode WXYZ-1234."""
    return await project_service.create_project(
        client_name="Acme Corp",
        project_name="Acme Site",
        passcode="WXYZ-1234",
        start_date=date(2025, 1, 6),
        launch_date=date(2025, 4, 30),
    )

"""POST /api/verify-passcode status codes."""
import pytest

pytestmark = pytest.mark.integration


def test_match_is_case_insensitive(api_client, acme):
    response = api_client.post(
        "/api/verify-passcode", json={"projectId": acme["project"]["id"], "passcode": "wxyz-1234"}
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_mismatch(api_client, acme):
    response = api_client.post(
        "/api/verify-passcode", json={"projectId": acme["project"]["id"], "passcode": "AAAA-BBBB"}
    )
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid passcode"}


def test_unknown_project(api_client):
    response = api_client.post("/api/verify-passcode", json={"projectId": "missing", "passcode": "WXYZ-1234"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Project not found"}


@pytest.mark.parametrize("body", [{}, {"projectId": "p"}, {"passcode": "WXYZ-1234"}, {"projectId": "", "passcode": ""}])
def test_missing_fields(api_client, body):
    response = api_client.post("/api/verify-passcode", json=body)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing projectId or passcode"}


def test_lookup_failure_is_server_error(api_client):
    from portal.api.deps import get_passcode_gate
    from portal.gateway.memory import InMemoryGateway
    from portal.services.passcode_gate import PasscodeGate

    gateway = InMemoryGateway()
    gateway.fail("select_one", "projects")
    api_client.app.dependency_overrides[get_passcode_gate] = lambda: PasscodeGate(gateway)
    try:
        response = api_client.post("/api/verify-passcode", json={"projectId": "p-1", "passcode": "WXYZ-1234"})
    finally:
        api_client.app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error"}

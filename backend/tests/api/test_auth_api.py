"""Admin login, logout and session checks over HTTP."""
import pytest

ADMIN_EMAIL = "ops@studio.test"
ADMIN_PASSWORD = "hunter22"

pytestmark = pytest.mark.integration


def test_login_returns_token(api_client):
    response = api_client.post("/api/admin/login", json={"email": " OPS@studio.test ", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == ADMIN_EMAIL
    assert body["token"]
    assert body["expires_at"]


@pytest.mark.parametrize(
    "email, password",
    [(ADMIN_EMAIL, "wrong"), ("nobody@studio.test", ADMIN_PASSWORD)],
)
def test_bad_credentials(api_client, email, password):
    response = api_client.post("/api/admin/login", json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"
    assert "debug_id" in response.json()


def test_me(api_client, admin_headers):
    response = api_client.get("/api/admin/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["email"] == ADMIN_EMAIL


def test_logout_revokes_token(api_client, admin_headers):
    assert api_client.post("/api/admin/logout", headers=admin_headers).status_code == 204
    response = api_client.get("/api/admin/me", headers=admin_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired session"


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/projects"),
        ("post", "/api/projects"),
        ("patch", "/api/tasks/any"),
        ("patch", "/api/phases/any/completion"),
        ("get", "/api/deliverables/any/comments"),
    ],
)
def test_admin_routes_require_session(api_client, method, path):
    response = getattr(api_client, method)(path)
    assert response.status_code == 401


def test_forged_token_rejected(api_client):
    response = api_client.get("/api/projects", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401

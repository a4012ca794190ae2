"""Admin authentication routes: login, logout, current session."""

from fastapi import APIRouter, Depends

from portal.api.deps import get_admin_auth
from portal.core.auth import AdminSession, require_admin
from portal.schemas.auth import AdminLoginRequest, AdminLoginResponse
from portal.services.admin_auth import AdminAuthService

router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
async def login(
    request: AdminLoginRequest,
    auth: AdminAuthService = Depends(get_admin_auth),
):
    """Exchange admin email and password for a bearer token.

    Raises:
        AuthenticationError(401): If the credentials do not match
    """
    session = await auth.login(request.email, request.password)
    return AdminLoginResponse(
        token=session.token,
        admin_id=session.admin_id,
        email=session.email,
        expires_at=session.expires_at,
    )


@router.post("/logout", status_code=204)
async def logout(
    admin: AdminSession = Depends(require_admin),
    auth: AdminAuthService = Depends(get_admin_auth),
):
    """Revoke the current session."""
    await auth.logout(admin)


@router.get("/me", response_model=AdminLoginResponse)
async def current_admin(admin: AdminSession = Depends(require_admin)):
    """The session behind the bearer token."""
    return AdminLoginResponse(
        token=admin.token,
        admin_id=admin.admin_id,
        email=admin.email,
        expires_at=admin.expires_at,
    )

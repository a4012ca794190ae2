"""FastAPI dependencies shared by the routers.

Override these in tests via app.dependency_overrides.
"""

from fastapi import Depends, Header, Request

from portal.core.auth import AdminSessionStore, get_session_store
from portal.core.config import Settings, get_settings
from portal.db.base import get_session_factory
from portal.gateway import InMemoryBlobStore, PersistenceGateway, S3BlobStore, SqlGateway
from portal.gateway.protocol import BlobStore, Record
from portal.services.admin_auth import AdminAuthService
from portal.services.clone_service import ProjectCloner
from portal.services.completion_service import CompletionEngine
from portal.services.deliverable_service import DeliverableService
from portal.services.file_service import FileService
from portal.services.onboarding_service import OnboardingCapture
from portal.services.passcode_gate import PasscodeGate
from portal.services.project_service import ProjectService

PASSCODE_HEADER = "X-Project-Passcode"


def build_blob_store(settings: Settings) -> BlobStore:
    """Blob store for the configured backend.

    Returns S3BlobStore when STORAGE_BACKEND=s3. Falls back to an in-process
    InMemoryBlobStore for local dev without a bucket.
    """
    if settings.storage_backend == "s3":
        return S3BlobStore(
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            public_base_url=settings.storage_public_base_url,
        )
    return InMemoryBlobStore()


def get_blob_store(request: Request) -> BlobStore:
    """The app-wide blob store created in the lifespan handler."""
    store = getattr(request.app.state, "blob_store", None)
    if store is None:
        raise RuntimeError("Blob store not initialized. Is the lifespan handler running?")
    return store


def get_gateway(blob_store: BlobStore = Depends(get_blob_store)) -> PersistenceGateway:
    return SqlGateway(get_session_factory(), blob_store)


def get_project_service(gateway: PersistenceGateway = Depends(get_gateway)) -> ProjectService:
    return ProjectService(gateway)


def get_completion_engine(gateway: PersistenceGateway = Depends(get_gateway)) -> CompletionEngine:
    return CompletionEngine(gateway)


def get_project_cloner(gateway: PersistenceGateway = Depends(get_gateway)) -> ProjectCloner:
    return ProjectCloner(gateway)


def get_passcode_gate(gateway: PersistenceGateway = Depends(get_gateway)) -> PasscodeGate:
    return PasscodeGate(gateway)


def get_deliverable_service(gateway: PersistenceGateway = Depends(get_gateway)) -> DeliverableService:
    return DeliverableService(gateway)


def get_file_service(gateway: PersistenceGateway = Depends(get_gateway)) -> FileService:
    settings = get_settings()
    return FileService(gateway, settings.project_files_bucket, settings.max_upload_bytes)


def get_onboarding_capture(gateway: PersistenceGateway = Depends(get_gateway)) -> OnboardingCapture:
    settings = get_settings()
    return OnboardingCapture(gateway, settings.onboarding_assets_bucket, settings.max_upload_bytes)


def get_admin_auth(
    gateway: PersistenceGateway = Depends(get_gateway),
    sessions: AdminSessionStore = Depends(get_session_store),
) -> AdminAuthService:
    return AdminAuthService(gateway, sessions)


async def require_passcode(
    project_id: str,
    x_project_passcode: str | None = Header(default=None, alias=PASSCODE_HEADER),
    gate: PasscodeGate = Depends(get_passcode_gate),
) -> Record:
    """Client-route dependency: the project, if the X-Project-Passcode header unlocks it.

    Raises AuthenticationError (401) on a missing or wrong passcode and
    NotFoundError (404) for an unknown project.
    """
    return await gate.require(project_id, x_project_passcode)

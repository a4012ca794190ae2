from fastapi import APIRouter

from portal.api.routes import auth, deliverables, health, phases, portal, projects, tasks, verify_passcode

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(verify_passcode.router, tags=["portal"])
api_router.include_router(portal.router, prefix="/portal", tags=["portal"])
api_router.include_router(auth.router, prefix="/admin", tags=["admin"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(phases.router, prefix="/phases", tags=["projects"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["projects"])
api_router.include_router(deliverables.router, prefix="/deliverables", tags=["projects"])

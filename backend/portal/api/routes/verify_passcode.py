"""Passcode verification endpoint used by the client login form."""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portal.api.deps import get_passcode_gate
from portal.core.exceptions import GatewayError
from portal.schemas.auth import VerifyPasscodeRequest, VerifyPasscodeResponse
from portal.services.passcode_gate import PasscodeGate

logger = structlog.get_logger(__name__)

router = APIRouter()


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.post("/verify-passcode", response_model=VerifyPasscodeResponse, response_model_exclude_none=True)
async def verify_passcode(
    request: VerifyPasscodeRequest,
    gate: PasscodeGate = Depends(get_passcode_gate),
):
    """Check a passcode for a project.

    Responses:
        200 {success: true} on a match
        400 when projectId or passcode is missing
        401 on a mismatch
        404 when the project id is unknown
        500 when the lookup itself fails
    """
    if not request.projectId or not request.passcode:
        return _fail(400, "Missing projectId or passcode")

    try:
        result = await gate.verify(request.projectId, request.passcode)
    except GatewayError as exc:
        logger.error("passcode_verification_failed", error=str(exc), error_type=type(exc).__name__)
        return _fail(500, "Server error")

    if result.granted:
        return VerifyPasscodeResponse(success=True)
    if result.reason == "not_found":
        return _fail(404, "Project not found")
    return _fail(401, "Invalid passcode")

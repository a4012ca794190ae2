"""Authentication Pydantic schemas: admin login and client passcode checks."""

from datetime import datetime

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(BaseModel):
    token: str
    admin_id: str
    email: str
    expires_at: datetime


class VerifyPasscodeRequest(BaseModel):
    """Body of POST /api/verify-passcode.

    Both fields are optional here so a missing one is answered with 400
    rather than a schema-validation 422.
    """

    projectId: str | None = None
    passcode: str | None = None


class VerifyPasscodeResponse(BaseModel):
    success: bool
    message: str | None = None


class PasscodeLookupRequest(BaseModel):
    passcode: str = Field(..., min_length=1)


class PasscodeLookupResponse(BaseModel):
    project_id: str

"""PasscodeGate: client access to a project by its passcode.

The passcode is a capability token: whoever holds it gets the full client
view of one project. Matching is delegated to a CredentialVerifier; the
default compares both sides uppercased.
"""

from dataclasses import dataclass

import structlog

from portal.core.credentials import CredentialVerifier, get_passcode_verifier
from portal.core.exceptions import AuthenticationError, NotFoundError
from portal.domain.passcodes import normalize_passcode
from portal.gateway.protocol import PersistenceGateway, Record

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GateResult:
    """Outcome of a passcode check. reason is "ok", "mismatch" or "not_found"."""

    granted: bool
    reason: str


class PasscodeGate:
    def __init__(self, gateway: PersistenceGateway, verifier: CredentialVerifier | None = None):
        self.gateway = gateway
        self.verifier = verifier or get_passcode_verifier()

    async def verify(self, project_id: str, submitted: str) -> GateResult:
        """Check a submitted passcode against a project's stored one.

        An unknown project id fails closed with granted=False; it never raises
        NotFoundError. Gateway failures still propagate.
        """
        try:
            project = await self.gateway.select_one("projects", {"id": project_id})
        except NotFoundError:
            logger.info("passcode_denied", project_id=project_id, reason="not_found")
            return GateResult(granted=False, reason="not_found")

        if self.verifier.verify(project["passcode"], submitted):
            return GateResult(granted=True, reason="ok")

        logger.info("passcode_denied", project_id=project_id, reason="mismatch")
        return GateResult(granted=False, reason="mismatch")

    async def require(self, project_id: str, submitted: str | None) -> Record:
        """Return the project if the passcode grants access.

        Raises:
            NotFoundError: If the project does not exist
            AuthenticationError: If the passcode is missing or does not match
        """
        if not submitted:
            raise AuthenticationError("Missing passcode")

        project = await self.gateway.select_one("projects", {"id": project_id})
        if not self.verifier.verify(project["passcode"], submitted):
            logger.info("passcode_denied", project_id=project_id, reason="mismatch")
            raise AuthenticationError("Invalid passcode")
        return project

    async def lookup(self, submitted: str) -> Record | None:
        """Resolve a project from its passcode alone, as the landing form does.

        Stored passcodes are always in normalized form, so the lookup is an
        equality match on the normalized submission.
        """
        try:
            return await self.gateway.select_one("projects", {"passcode": normalize_passcode(submitted)})
        except NotFoundError:
            logger.info("passcode_lookup_missed")
            return None

"""AdminAuthService: admin login and logout.

Credentials are checked through a CredentialVerifier against the
admin_users table. A match issues an AdminSession held in Redis.
"""

import structlog

from portal.core.auth import AdminSession, AdminSessionStore
from portal.core.credentials import CredentialVerifier, get_password_verifier
from portal.core.exceptions import AuthenticationError, NotFoundError
from portal.gateway.protocol import PersistenceGateway

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AdminAuthService:
    def __init__(
        self,
        gateway: PersistenceGateway,
        sessions: AdminSessionStore,
        verifier: CredentialVerifier | None = None,
    ):
        self.gateway = gateway
        self.sessions = sessions
        self.verifier = verifier or get_password_verifier()

    async def login(self, email: str, password: str) -> AdminSession:
        """Verify admin credentials and open a session.

        Raises:
            AuthenticationError: If the email is unknown or the password does not match
        """
        email = normalize_email(email)
        try:
            admin = await self.gateway.select_one("admin_users", {"email": email})
        except NotFoundError:
            logger.info("admin_login_failed", reason="unknown_email")
            raise AuthenticationError("Invalid email or password") from None

        if not self.verifier.verify(admin["password_hash"], password):
            logger.info("admin_login_failed", admin_id=admin["id"], reason="bad_password")
            raise AuthenticationError("Invalid email or password")

        session = await self.sessions.issue(admin["id"], admin["email"])
        logger.info("admin_login", admin_id=admin["id"], expires_at=session.expires_at.isoformat())
        return session

    async def logout(self, session: AdminSession) -> None:
        await self.sessions.revoke(session.token)
        logger.info("admin_logout", admin_id=session.admin_id)

"""Admin session authentication for FastAPI.

A successful admin login issues an opaque bearer token. The session behind
it lives in Redis under a TTL, and its own expires_at is checked again on
every request so a session never outlives its issuance window even if the
Redis key lingers.
"""

import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import redis.asyncio as redis
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.core.config import get_settings
from portal.db.redis import get_redis

_bearer_scheme = HTTPBearer(auto_error=False)

SESSION_KEY_PREFIX = "admin_session:"


@dataclass(frozen=True)
class AdminSession:
    """Authenticated admin, resolved from a bearer token."""

    token: str
    admin_id: str
    email: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def to_json(self) -> str:
        return json.dumps(
            {
                "token": self.token,
                "admin_id": self.admin_id,
                "email": self.email,
                "issued_at": self.issued_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "AdminSession":
        data = json.loads(raw)
        return cls(
            token=data["token"],
            admin_id=data["admin_id"],
            email=data["email"],
            issued_at=datetime.fromisoformat(data["issued_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class AdminSessionStore:
    """Issues, resolves and revokes admin sessions in Redis."""

    def __init__(self, redis_client: redis.Redis, ttl: timedelta):
        self.redis = redis_client
        self.ttl = ttl

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_KEY_PREFIX}{token}"

    async def issue(self, admin_id: str, email: str, now: datetime | None = None) -> AdminSession:
        issued_at = now or datetime.now(timezone.utc)
        session = AdminSession(
            token=secrets.token_urlsafe(32),
            admin_id=admin_id,
            email=email,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl,
        )
        await self.redis.set(self._key(session.token), session.to_json(), ex=int(self.ttl.total_seconds()))
        return session

    async def get(self, token: str, now: datetime | None = None) -> AdminSession | None:
        raw = await self.redis.get(self._key(token))
        if raw is None:
            return None
        session = AdminSession.from_json(raw)
        if session.is_expired(now):
            await self.revoke(token)
            return None
        return session

    async def revoke(self, token: str) -> None:
        await self.redis.delete(self._key(token))


def get_session_store(redis_client: redis.Redis = Depends(get_redis)) -> AdminSessionStore:
    """Dependency that provides the admin session store."""
    settings = get_settings()
    return AdminSessionStore(redis_client, timedelta(minutes=settings.admin_session_ttl_minutes))


async def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    store: AdminSessionStore = Depends(get_session_store),
) -> AdminSession:
    """FastAPI dependency that resolves the admin session from the bearer token.

    Usage::

        @router.get("/projects")
        async def list_projects(admin: AdminSession = Depends(require_admin)):
            ...
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    session = await store.get(credentials.credentials)
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    # Set admin_id on request state for downstream use (error handlers, audit logging)
    request.state.admin_id = session.admin_id

    return session

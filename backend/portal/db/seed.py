"""Idempotent seed data for the bootstrap admin user."""

from sqlalchemy import select

from portal.core.config import get_settings
from portal.db.base import get_session_factory
from portal.db.models.admin_user import AdminUser


async def seed_admin_user() -> bool:
    """Insert the configured admin user if it doesn't already exist.

    Does nothing unless both ADMIN_EMAIL and ADMIN_PASSWORD are set. The
    password is stored as-is, matching the plaintext password verifier.

    Returns:
        True if a user was inserted
    """
    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        return False

    email = settings.admin_email.strip().lower()
    factory = get_session_factory()

    async with factory() as session:
        result = await session.execute(select(AdminUser).where(AdminUser.email == email))
        if result.scalar_one_or_none() is not None:
            return False

        session.add(AdminUser(email=email, password_hash=settings.admin_password))
        await session.commit()
        return True

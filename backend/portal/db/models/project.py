"""Project model: one client engagement, gated by its passcode."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String

from portal.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    client_name = Column(String(255), nullable=False)
    project_name = Column(String(255), nullable=False)
    passcode = Column(String(64), nullable=False, unique=True, index=True)

    start_date = Column(Date, nullable=True)
    launch_date = Column(Date, nullable=True)
    current_phase = Column(Integer, nullable=False, default=0)  # index into phases by phase_order

    onboarding_completed = Column(Boolean, nullable=False, default=False)
    onboarding_completed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

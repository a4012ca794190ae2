"""OnboardingResponse model: append log of questionnaire submissions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from portal.db.base import Base


class OnboardingResponse(Base):
    __tablename__ = "onboarding_responses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)

    response_data = Column(JSON, nullable=False, default=dict)  # OnboardingResponseV1 as dict

    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

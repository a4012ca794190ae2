"""ProjectFile model: metadata for a blob held in object storage."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String, Text

from portal.db.base import Base


class ProjectFile(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    deliverable_id = Column(String(36), ForeignKey("deliverables.id"), nullable=True, index=True)

    file_name = Column(String(512), nullable=False)
    file_url = Column(Text, nullable=False)
    file_type = Column(String(255), nullable=False, default="application/octet-stream")
    file_size = Column(BigInteger, nullable=False, default=0)
    uploaded_by = Column(String(10), nullable=False)  # admin, client

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

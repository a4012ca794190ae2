import uuid

from sqlalchemy import Column, ForeignKey, String, Text

from portal.db.base import Base


class Deliverable(Base):
    __tablename__ = "deliverables"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    phase_id = Column(String(36), ForeignKey("phases.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="not-started")  # not-started, in-progress, review, delivered
    file_url = Column(Text, nullable=True)

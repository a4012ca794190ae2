import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from portal.db.base import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    phase_id = Column(String(36), ForeignKey("phases.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    task_order = Column(Integer, nullable=False, default=0)

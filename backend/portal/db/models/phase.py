"""Phase model: one of the five ordered stages of a project."""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint

from portal.db.base import Base


class Phase(Base):
    __tablename__ = "phases"
    __table_args__ = (UniqueConstraint("project_id", "phase_order", name="uq_phases_project_order"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)

    phase_order = Column(Integer, nullable=False)  # 0..4
    name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="upcoming")  # upcoming, in-progress, complete
    completion = Column(Integer, nullable=False, default=0)  # 0..100
    next_steps = Column(Text, nullable=False, default="")

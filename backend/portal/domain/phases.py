"""Phase, deliverable and participant enums.

Pure domain logic with no external dependencies.
"""
from enum import Enum

PHASE_COUNT = 5


class PhaseStatus(str, Enum):
    """Where a phase sits in the project timeline."""

    UPCOMING = "upcoming"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class DeliverableStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DELIVERED = "delivered"


class UserType(str, Enum):
    """Which side of the portal wrote a comment or uploaded a file."""

    ADMIN = "admin"
    CLIENT = "client"


def initial_phase_status(phase_order: int) -> PhaseStatus:
    """Status a phase starts with: the first phase is underway, the rest are upcoming."""
    return PhaseStatus.IN_PROGRESS if phase_order == 0 else PhaseStatus.UPCOMING


def validate_phase_index(current_phase: int) -> int:
    """Reject a current_phase that does not index into the five phases.

    Raises:
        ValueError: If current_phase is outside 0..PHASE_COUNT-1
    """
    if not 0 <= current_phase < PHASE_COUNT:
        raise ValueError(f"current_phase must be between 0 and {PHASE_COUNT - 1}, got {current_phase}")
    return current_phase

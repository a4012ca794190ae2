"""Deterministic phase completion computation.

Pure functions with no external dependencies.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (12.5 -> 13).

    Python's round() sends halves to the even neighbour, which would report
    1 of 8 tasks as 12% instead of 13%.
    """
    return int(math.floor(value + 0.5))


def compute_phase_completion(tasks: list[dict]) -> int | None:
    """Compute phase completion (0-100) from its tasks' completed flags.

    Args:
        tasks: Every task currently in the phase, [{"completed": bool, ...}]

    Returns:
        Integer percentage 0-100, or None when the phase has no tasks
        (callers then leave the stored completion untouched).

    Pure function -- deterministic, no side effects.
    """
    total = len(tasks)
    if total == 0:
        return None

    completed = sum(1 for t in tasks if t.get("completed"))
    return round_half_up(100 * completed / total)


def validate_completion(value: int) -> int:
    """Validate a manually set completion percentage.

    Raises:
        ValueError: If value is outside 0-100
    """
    if not 0 <= value <= 100:
        raise ValueError(f"completion must be between 0 and 100, got {value}")
    return value

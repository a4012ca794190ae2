"""Table name to ORM model registry shared by the gateway implementations."""

from typing import Any

from sqlalchemy import UniqueConstraint

from portal.db.base import Base
from portal.db.models import (
    AdminUser,
    Comment,
    Deliverable,
    OnboardingResponse,
    Phase,
    Project,
    ProjectFile,
    Task,
)

TABLES: dict[str, type[Base]] = {
    "projects": Project,
    "phases": Phase,
    "tasks": Task,
    "deliverables": Deliverable,
    "comments": Comment,
    "files": ProjectFile,
    "onboarding_responses": OnboardingResponse,
    "admin_users": AdminUser,
}


def model_for(table: str) -> type[Base]:
    try:
        return TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}. Valid tables: {sorted(TABLES)}") from None


def column_names(table: str) -> list[str]:
    return [c.key for c in model_for(table).__table__.columns]


def to_record(obj: Base) -> dict[str, Any]:
    """Convert an ORM row into a plain dict keyed by column name."""
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns}


def apply_defaults(table: str, record: dict[str, Any]) -> dict[str, Any]:
    """Fill missing columns with the model's Python-side defaults (or None)."""
    out = dict(record)
    for col in model_for(table).__table__.columns:
        if col.key in out:
            continue
        default = col.default
        if default is None:
            out[col.key] = None
        elif default.is_callable:
            out[col.key] = default.arg(None)
        else:
            out[col.key] = default.arg
    return out


def unique_keys(table: str) -> list[tuple[str, ...]]:
    """Column groups that must be unique per row: primary key, unique columns, UniqueConstraints."""
    tbl = model_for(table).__table__
    keys = [(c.key,) for c in tbl.columns if c.unique or c.primary_key]
    for constraint in tbl.constraints:
        if isinstance(constraint, UniqueConstraint):
            keys.append(tuple(c.key for c in constraint.columns))
    return list(dict.fromkeys(keys))

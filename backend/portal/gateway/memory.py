"""In-memory PersistenceGateway and BlobStore.

Used for local development without a database or bucket, and as the test
double for service tests. Failure injection makes any (operation, table)
pair raise GatewayError, optionally after a number of successful calls, so
tests can stop a multi-step sequence at an exact step.
"""

import uuid
from collections import defaultdict
from copy import deepcopy
from typing import Any

from portal.core.exceptions import GatewayError, NotFoundError
from portal.gateway.protocol import Record
from portal.gateway.tables import TABLES, apply_defaults, column_names, unique_keys


class InMemoryBlobStore:
    """BlobStore holding bytes in a dict keyed by (bucket, path)."""

    def __init__(self, base_url: str = "memory://"):
        self.base_url = base_url
        self.blobs: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str | None] = {}
        self.fail_uploads = False

    async def upload_blob(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> None:
        if self.fail_uploads:
            raise GatewayError("upload_blob", f"{bucket}/{path}", RuntimeError("Injected upload failure"))
        self.blobs[(bucket, path)] = bytes(data)
        self.content_types[(bucket, path)] = content_type

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}{bucket}/{path}"


class InMemoryGateway(InMemoryBlobStore):
    """Dict-backed PersistenceGateway.

    Rows are kept in insertion order per table; defaults and uniqueness come
    from the ORM models so behaviour tracks the real schema.

    Failure injection:
        gw.fail("update", "projects")            # every projects update fails
        gw.fail("insert", "phases", after=2)     # third phases insert fails
    """

    def __init__(self, base_url: str = "memory://"):
        super().__init__(base_url)
        self.tables: dict[str, dict[str, Record]] = {name: {} for name in TABLES}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], int] = {}
        self._call_counts: dict[tuple[str, str], int] = defaultdict(int)

    # ------------------------------------------------------------------
    # Failure injection
    # ------------------------------------------------------------------

    def fail(self, operation: str, table: str, after: int = 0) -> None:
        """Make `operation` on `table` fail once `after` further calls have succeeded."""
        self._failures[(operation, table)] = after
        self._call_counts[(operation, table)] = 0

    def clear_failures(self) -> None:
        self._failures.clear()

    def _record_call(self, operation: str, table: str) -> None:
        if table not in self.tables:
            raise ValueError(f"Unknown table: {table}. Valid tables: {sorted(self.tables)}")
        key = (operation, table)
        self.calls.append(key)
        allowed = self._failures.get(key)
        if allowed is not None and self._call_counts[key] >= allowed:
            raise GatewayError(operation, table, RuntimeError("Injected failure"))
        self._call_counts[key] += 1

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def insert(self, table: str, record: Record) -> Record:
        self._record_call("insert", table)
        return self._store(table, [record], "insert")[0]

    async def insert_many(self, table: str, records: list[Record]) -> list[Record]:
        if not records:
            return []
        self._record_call("insert_many", table)
        return self._store(table, records, "insert_many")

    def _store(self, table: str, records: list[Record], operation: str) -> list[Record]:
        known = set(column_names(table))
        rows = []
        for record in records:
            unknown = set(record) - known
            if unknown:
                raise TypeError(f"Unknown columns for {table}: {sorted(unknown)}")
            row = apply_defaults(table, record)
            if row.get("id") is None:
                row["id"] = str(uuid.uuid4())
            rows.append(row)

        # Validate the whole batch before writing any of it
        existing = list(self.tables[table].values())
        for i, row in enumerate(rows):
            for key in unique_keys(table):
                value = tuple(row.get(col) for col in key)
                if any(tuple(other.get(col) for col in key) == value for other in existing + rows[:i]):
                    raise GatewayError(operation, table, ValueError(f"duplicate value for {key}: {value}"))

        for row in rows:
            self.tables[table][row["id"]] = row
        return [deepcopy(row) for row in rows]

    async def update(self, table: str, record_id: str, patch: Record) -> Record:
        self._record_call("update", table)
        row = self.tables[table].get(record_id)
        if row is None:
            raise NotFoundError(table, record_id)
        candidate = {**row, **patch}
        for key in unique_keys(table):
            value = tuple(candidate.get(col) for col in key)
            for other_id, other in self.tables[table].items():
                if other_id != record_id and tuple(other.get(col) for col in key) == value:
                    raise GatewayError("update", table, ValueError(f"duplicate value for {key}: {value}"))
        row.update(deepcopy(patch))
        return deepcopy(row)

    async def delete(self, table: str, record_id: str) -> None:
        self._record_call("delete", table)
        if self.tables[table].pop(record_id, None) is None:
            raise NotFoundError(table, record_id)

    async def delete_many(self, table: str, filters: Record) -> int:
        self._record_call("delete_many", table)
        doomed = [rid for rid, row in self.tables[table].items() if self._matches(row, filters)]
        for rid in doomed:
            del self.tables[table][rid]
        return len(doomed)

    async def select_one(self, table: str, filters: Record) -> Record:
        self._record_call("select_one", table)
        for row in self.tables[table].values():
            if self._matches(row, filters):
                return deepcopy(row)
        raise NotFoundError(table, ", ".join(f"{k}={v}" for k, v in filters.items()))

    async def select_many(
        self,
        table: str,
        filters: Record | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        self._record_call("select_many", table)
        rows = [deepcopy(r) for r in self.tables[table].values() if self._matches(r, filters or {})]
        if order_by is not None:
            rows.sort(key=lambda r: r[order_by], reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    @staticmethod
    def _matches(row: Record, filters: dict[str, Any]) -> bool:
        return all(row.get(key) == value for key, value in filters.items())

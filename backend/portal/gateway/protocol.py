"""PersistenceGateway protocol: the storage contract every service depends on.

Records are plain dicts keyed by column name. Every call is an independent
round trip; no transaction spans two calls, so a multi-step sequence that
fails midway leaves its earlier writes in place.

Record operations:
- insert / insert_many: create rows, returning them with generated ids and defaults
- update: patch one row by id
- delete / delete_many: remove rows (no cascade; callers delete children first)
- select_one: one row matching a filter, or NotFoundError
- select_many: rows matching a filter, optionally ordered and limited

Blob operations:
- upload_blob: store bytes at bucket/path
- get_public_url: URL a browser can fetch the blob from

Blobs are never deleted; deleting a project leaves its uploads in place.
"""

from typing import Any, Protocol, runtime_checkable

Record = dict[str, Any]


@runtime_checkable
class BlobStore(Protocol):
    """Object storage for uploaded files and onboarding assets."""

    async def upload_blob(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> None:
        ...

    def get_public_url(self, bucket: str, path: str) -> str:
        ...


@runtime_checkable
class PersistenceGateway(BlobStore, Protocol):
    """CRUD plus blob storage.

    Implementations:
    - SqlGateway: SQLAlchemy async sessions + a BlobStore (production)
    - InMemoryGateway: dict-backed with failure injection (local dev and tests)
    """

    async def insert(self, table: str, record: Record) -> Record:
        """Insert one row and return it as stored.

        Raises:
            GatewayError: On constraint violations or backend failure
        """
        ...

    async def insert_many(self, table: str, records: list[Record]) -> list[Record]:
        """Bulk insert in a single round trip. Returns rows in input order."""
        ...

    async def update(self, table: str, record_id: str, patch: Record) -> Record:
        """Apply patch to one row.

        Raises:
            NotFoundError: If no row has this id
            GatewayError: On backend failure
        """
        ...

    async def delete(self, table: str, record_id: str) -> None:
        ...

    async def delete_many(self, table: str, filters: Record) -> int:
        """Delete every row matching filters. Returns the number removed."""
        ...

    async def select_one(self, table: str, filters: Record) -> Record:
        """Return the single row matching filters.

        Raises:
            NotFoundError: If nothing matches
        """
        ...

    async def select_many(
        self,
        table: str,
        filters: Record | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        ...

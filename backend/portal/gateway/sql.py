"""SqlGateway: PersistenceGateway over SQLAlchemy async sessions.

Each call opens its own session and commits before returning, so two calls
never share a transaction. SQLAlchemy errors are wrapped in GatewayError.
"""

from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portal.core.exceptions import GatewayError, NotFoundError
from portal.gateway.protocol import BlobStore, Record
from portal.gateway.tables import model_for, to_record

logger = structlog.get_logger(__name__)


class SqlGateway:
    """Record store backed by the relational database, blobs delegated to a BlobStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], blob_store: BlobStore):
        self.session_factory = session_factory
        self.blob_store = blob_store

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def insert(self, table: str, record: Record) -> Record:
        rows = await self._insert(table, [record], operation="insert")
        return rows[0]

    async def insert_many(self, table: str, records: list[Record]) -> list[Record]:
        if not records:
            return []
        return await self._insert(table, records, operation="insert_many")

    async def _insert(self, table: str, records: list[Record], operation: str) -> list[Record]:
        model = model_for(table)
        try:
            async with self.session_factory() as session:
                objs = [model(**record) for record in records]
                session.add_all(objs)
                await session.commit()
                return [to_record(obj) for obj in objs]
        except SQLAlchemyError as exc:
            logger.warning("gateway_write_failed", operation=operation, table=table, error=str(exc))
            raise GatewayError(operation, table, exc) from exc

    async def update(self, table: str, record_id: str, patch: Record) -> Record:
        model = model_for(table)
        try:
            async with self.session_factory() as session:
                obj = await session.get(model, record_id)
                if obj is None:
                    raise NotFoundError(table, record_id)
                for key, value in patch.items():
                    setattr(obj, key, value)
                await session.commit()
                return to_record(obj)
        except SQLAlchemyError as exc:
            logger.warning("gateway_write_failed", operation="update", table=table, error=str(exc))
            raise GatewayError("update", table, exc) from exc

    async def delete(self, table: str, record_id: str) -> None:
        model = model_for(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(delete(model).where(model.id == record_id))
                await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("gateway_write_failed", operation="delete", table=table, error=str(exc))
            raise GatewayError("delete", table, exc) from exc
        if result.rowcount == 0:
            raise NotFoundError(table, record_id)

    async def delete_many(self, table: str, filters: Record) -> int:
        model = model_for(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(delete(model).where(*self._where(model, filters)))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            logger.warning("gateway_write_failed", operation="delete_many", table=table, error=str(exc))
            raise GatewayError("delete_many", table, exc) from exc

    async def select_one(self, table: str, filters: Record) -> Record:
        model = model_for(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(model).where(*self._where(model, filters)).limit(1))
                obj = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise GatewayError("select_one", table, exc) from exc
        if obj is None:
            raise NotFoundError(table, ", ".join(f"{k}={v}" for k, v in filters.items()))
        return to_record(obj)

    async def select_many(
        self,
        table: str,
        filters: Record | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        model = model_for(table)
        query = select(model).where(*self._where(model, filters or {}))
        if order_by is not None:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            query = query.limit(limit)
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return [to_record(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise GatewayError("select_many", table, exc) from exc

    @staticmethod
    def _where(model: Any, filters: Record) -> list:
        return [getattr(model, key) == value for key, value in filters.items()]

    # ------------------------------------------------------------------
    # Blobs
    # ------------------------------------------------------------------

    async def upload_blob(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> None:
        await self.blob_store.upload_blob(bucket, path, data, content_type)

    def get_public_url(self, bucket: str, path: str) -> str:
        return self.blob_store.get_public_url(bucket, path)

"""Persistence Gateway: record store + blob store behind one protocol."""

from portal.gateway.memory import InMemoryBlobStore, InMemoryGateway
from portal.gateway.protocol import BlobStore, PersistenceGateway, Record
from portal.gateway.s3 import S3BlobStore
from portal.gateway.sql import SqlGateway

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "InMemoryGateway",
    "PersistenceGateway",
    "Record",
    "S3BlobStore",
    "SqlGateway",
]

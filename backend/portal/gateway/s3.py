"""S3BlobStore: uploaded files and onboarding assets in S3 (or an S3-compatible store).

boto3 is blocking, so every call runs in a worker thread via asyncio.to_thread().
Public URLs are derived locally without a round trip.
"""

import asyncio
from urllib.parse import quote

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from portal.core.exceptions import GatewayError

logger = structlog.get_logger(__name__)


class S3BlobStore:
    """BlobStore backed by S3 buckets.

    Usage:
        store = S3BlobStore(region="us-east-1")
        await store.upload_blob("project-files", "proj-1/123-abc.pdf", data, "application/pdf")
        url = store.get_public_url("project-files", "proj-1/123-abc.pdf")
    """

    def __init__(self, region: str = "us-east-1", endpoint_url: str = "", public_base_url: str = "") -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        self._public_base_url = public_base_url

    async def upload_blob(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> None:
        try:
            await asyncio.to_thread(self._put_s3, bucket, path, data, content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("blob_upload_failed", bucket=bucket, path=path, error=str(exc))
            raise GatewayError("upload_blob", f"{bucket}/{path}", exc) from exc
        logger.info("blob_uploaded", bucket=bucket, path=path, size_bytes=len(data))

    def get_public_url(self, bucket: str, path: str) -> str:
        key = quote(path)
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{bucket}/{key}"
        if self._endpoint_url:
            return f"{self._endpoint_url.rstrip('/')}/{bucket}/{key}"
        return f"https://{bucket}.s3.{self._region}.amazonaws.com/{key}"

    # ------------------------------------------------------------------
    # Private helpers (run inside asyncio.to_thread)
    # ------------------------------------------------------------------

    def _client(self):
        kwargs = {"region_name": self._region}
        if self._endpoint_url:
            kwargs["endpoint_url"] = self._endpoint_url
        return boto3.client("s3", **kwargs)

    def _put_s3(self, bucket: str, key: str, body: bytes, content_type: str | None) -> None:
        s3 = self._client()
        s3.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type or "application/octet-stream",
            CacheControl="max-age=3600",
        )

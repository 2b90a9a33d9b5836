"""S3-compatible object storage (AWS S3, MinIO, R2, etc.)."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import quote, unquote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from filedrop.domain.entities import ListPage, ObjectInfo, StoredObject
from filedrop.domain.exceptions import ValidationException
from filedrop.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageListError,
    StorageUploadError,
)
from filedrop.shared.telemetry.logging import get_logger
from filedrop.shared.utils.datetime import ensure_utc, utc_now
from filedrop.shared.utils.files import DEFAULT_CONTENT_TYPE

logger = get_logger(__name__)

# S3 lower-cases user metadata names and only allows ASCII values, so the
# custom metadata map travels as one percent-encoded JSON entry.
METADATA_ENTRY = "filedrop-metadata"
_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code"))


def _is_not_found(error: ClientError) -> bool:
    return _error_code(error) in _NOT_FOUND_CODES


def encode_custom_metadata(custom_metadata: dict[str, str]) -> dict[str, str]:
    if not custom_metadata:
        return {}
    return {METADATA_ENTRY: quote(json.dumps(custom_metadata, separators=(",", ":")))}


def decode_custom_metadata(raw: dict[str, str] | None) -> dict[str, str]:
    """Recover the custom metadata map; objects written by other tools keep their raw map."""
    raw = raw or {}
    encoded = raw.get(METADATA_ENTRY)
    if encoded is None:
        return dict(raw)
    try:
        decoded = json.loads(unquote(encoded))
    except json.JSONDecodeError:
        logger.warning("Unreadable %s metadata entry; returning raw map", METADATA_ENTRY)
        return dict(raw)
    return {str(k): str(v) for k, v in decoded.items()} if isinstance(decoded, dict) else {}


class S3StorageService:
    """S3-compatible storage for one bucket.

    Uses boto3 (sync) via asyncio.to_thread for async API. Listing issues
    one HEAD per returned object so entries carry content type and custom
    metadata.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/R2).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            client: Pre-built boto3 S3 client (shared between buckets).
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        if client is None:
            extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
            client = boto3.client(
                "s3",
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                **extra,
            )
        self._client = client

    def _info_from_head(self, key: str, head: dict[str, Any]) -> ObjectInfo:
        return ObjectInfo(
            key=key,
            size=int(head.get("ContentLength", 0)),
            uploaded=ensure_utc(head.get("LastModified")) or utc_now(),
            etag=str(head.get("ETag", "")).strip('"'),
            content_type=head.get("ContentType") or DEFAULT_CONTENT_TYPE,
            custom_metadata=decode_custom_metadata(head.get("Metadata")),
        )

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        custom_metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        def _put() -> dict[str, Any]:
            return self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=encode_custom_metadata(custom_metadata or {}),
            )

        try:
            resp = await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            raise StorageUploadError(key, str(e)) from e
        logger.info("Stored %s (%d bytes) in s3://%s", key, len(data), self.bucket)
        return ObjectInfo(
            key=key,
            size=len(data),
            uploaded=utc_now(),
            etag=str(resp.get("ETag", "")).strip('"'),
            content_type=content_type,
            custom_metadata=dict(custom_metadata or {}),
        )

    async def get(self, key: str) -> StoredObject | None:
        def _get() -> StoredObject | None:
            try:
                resp = self._client.get_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if _is_not_found(e):
                    return None
                raise
            body = resp["Body"].read()
            return StoredObject(info=self._info_from_head(key, resp), body=body)

        try:
            return await asyncio.to_thread(_get)
        except (ClientError, BotoCoreError) as e:
            raise StorageDownloadError(key, str(e)) from e

    async def delete(self, key: str) -> None:
        """Delete object; S3 reports success for missing keys too."""
        def _delete() -> None:
            self._client.delete_object(Bucket=self.bucket, Key=key)

        try:
            await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as e:
            raise StorageDeleteError(key, str(e)) from e
        logger.info("Deleted %s from s3://%s", key, self.bucket)

    async def list(
        self,
        prefix: str = "",
        delimiter: str = "/",
        limit: int = 1000,
        cursor: str | None = None,
    ) -> ListPage:
        def _list() -> ListPage:
            params: dict[str, Any] = {
                "Bucket": self.bucket,
                "Prefix": prefix,
                "MaxKeys": limit,
            }
            if delimiter:
                params["Delimiter"] = delimiter
            if cursor:
                params["ContinuationToken"] = cursor
            resp = self._client.list_objects_v2(**params)
            objects: list[ObjectInfo] = []
            for item in resp.get("Contents", []):
                key = item["Key"]
                try:
                    head = self._client.head_object(Bucket=self.bucket, Key=key)
                except ClientError as e:
                    if _is_not_found(e):
                        continue
                    raise
                objects.append(self._info_from_head(key, head))
            truncated = bool(resp.get("IsTruncated"))
            return ListPage(
                objects=objects,
                common_prefixes=[p["Prefix"] for p in resp.get("CommonPrefixes", [])],
                truncated=truncated,
                cursor=resp.get("NextContinuationToken") if truncated else None,
            )

        try:
            return await asyncio.to_thread(_list)
        except ClientError as e:
            # S3 rejects a continuation token it did not issue
            if cursor and _error_code(e) == "InvalidArgument":
                raise ValidationException("Invalid cursor", field="cursor") from e
            raise StorageListError(prefix, str(e)) from e
        except BotoCoreError as e:
            raise StorageListError(prefix, str(e)) from e

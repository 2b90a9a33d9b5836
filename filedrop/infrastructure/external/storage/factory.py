"""Storage factory: builds the bucket registry from settings."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from filedrop.core.config import BucketBinding
from filedrop.infrastructure.external.storage.protocol import StorageBackend
from filedrop.infrastructure.external.storage.registry import BucketRegistry
from filedrop.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from filedrop.core.config import Settings

logger = get_logger(__name__)


class StorageFactory:
    """Factory for storage backends based on configuration."""

    @staticmethod
    def create_storage_service(
        binding: BucketBinding,
        settings: "Settings",
        s3_client: Any | None = None,
    ) -> StorageBackend:
        """Create the backend for one bucket binding.

        Args:
            binding: Bucket name and backend target.
            settings: Application settings (backend kind, root, S3 credentials).
            s3_client: Shared boto3 client for the s3 backend.

        Returns:
            MemoryStorageService, LocalStorageService or S3StorageService.

        Raises:
            ValueError: Unknown backend.
        """
        backend = settings.storage_backend.lower()

        if backend == "memory":
            from filedrop.infrastructure.external.storage.memory_storage import (
                MemoryStorageService,
            )

            return MemoryStorageService(name=binding.name)
        if backend == "local":
            from filedrop.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            return LocalStorageService(Path(settings.storage_root) / binding.target)
        if backend == "s3":
            from filedrop.infrastructure.external.storage.s3_storage import (
                S3StorageService,
            )

            return S3StorageService(
                bucket=binding.target,
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint_url,
                access_key=settings.s3_access_key,
                secret_key=(
                    settings.s3_secret_key.get_secret_value()
                    if settings.s3_secret_key
                    else None
                ),
                client=s3_client,
            )
        raise ValueError(
            f"Unknown storage backend: {backend}. Supported: 'memory', 'local', 's3'"
        )


def build_bucket_registry(settings: "Settings") -> BucketRegistry:
    """Bind every configured bucket to a backend instance."""
    s3_client = None
    if settings.storage_backend.lower() == "s3":
        import boto3

        extra = (
            {} if settings.s3_endpoint_url is None
            else {"endpoint_url": settings.s3_endpoint_url}
        )
        s3_client = boto3.client(
            "s3",
            region_name=settings.s3_region,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=(
                settings.s3_secret_key.get_secret_value()
                if settings.s3_secret_key
                else None
            ),
            **extra,
        )
    buckets = [
        (b.name, StorageFactory.create_storage_service(b, settings, s3_client))
        for b in settings.bucket_bindings
    ]
    registry = BucketRegistry(buckets, default=settings.default_bucket)
    logger.info(
        "Bound %d bucket(s) on %s backend: %s (default %s)",
        len(registry),
        settings.storage_backend.lower(),
        ", ".join(registry.names()),
        registry.default_name,
    )
    return registry

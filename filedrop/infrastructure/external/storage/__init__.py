"""Object storage backends and the bucket registry."""

from filedrop.infrastructure.external.storage.factory import (
    StorageFactory,
    build_bucket_registry,
)
from filedrop.infrastructure.external.storage.protocol import StorageBackend
from filedrop.infrastructure.external.storage.registry import BucketRegistry

__all__ = ["BucketRegistry", "StorageBackend", "StorageFactory", "build_bucket_registry"]

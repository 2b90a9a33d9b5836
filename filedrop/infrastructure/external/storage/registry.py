"""Bucket registry: named storage backends bound at startup."""

from __future__ import annotations

from collections.abc import Iterable

from filedrop.domain.exceptions import NoBucketsAvailableException
from filedrop.infrastructure.external.storage.protocol import StorageBackend


class BucketRegistry:
    """Ordered mapping of bucket name to StorageBackend.

    The default bucket is ``default`` when it names a bound bucket, else the
    first bucket bound. Lookups of unknown names fall back to the default.
    """

    def __init__(
        self,
        buckets: Iterable[tuple[str, StorageBackend]] = (),
        default: str | None = None,
    ) -> None:
        self._buckets: dict[str, StorageBackend] = {}
        for name, backend in buckets:
            if name in self._buckets:
                raise ValueError(f"Bucket '{name}' is bound twice")
            self._buckets[name] = backend
        self._default = default

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, name: object) -> bool:
        return name in self._buckets

    def names(self) -> list[str]:
        """Bucket names in binding order."""
        return list(self._buckets)

    @property
    def default_name(self) -> str | None:
        if self._default and self._default in self._buckets:
            return self._default
        return next(iter(self._buckets), None)

    def get(self, name: str) -> StorageBackend | None:
        return self._buckets.get(name)

    def resolve(self, name: str | None = None) -> tuple[str, StorageBackend]:
        """Return ``(bucket_name, backend)`` for ``name``, or the default bucket.

        Raises:
            NoBucketsAvailableException: No bucket is bound.
        """
        if name and name in self._buckets:
            return name, self._buckets[name]
        default = self.default_name
        if default is None:
            raise NoBucketsAvailableException()
        return default, self._buckets[default]

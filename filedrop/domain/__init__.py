"""Domain layer: entities and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from filedrop.domain.entities import ListPage, ObjectInfo, StoredObject, UploadMetadata
from filedrop.domain.exceptions import (
    AuthenticationException,
    FileDropException,
    NoBucketsAvailableException,
    PayloadTooLargeException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Entities
    "ListPage",
    "ObjectInfo",
    "StoredObject",
    "UploadMetadata",
    # Exceptions
    "AuthenticationException",
    "FileDropException",
    "NoBucketsAvailableException",
    "PayloadTooLargeException",
    "ResourceNotFoundException",
    "ValidationException",
]

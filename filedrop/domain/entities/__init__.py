"""Domain entities.

Pure domain models; no storage or HTTP concerns.
"""

from filedrop.domain.entities.object import ListPage, ObjectInfo, StoredObject
from filedrop.domain.entities.upload import UploadMetadata

__all__ = ["ListPage", "ObjectInfo", "StoredObject", "UploadMetadata"]

"""Bucket discovery API schemas."""

from pydantic import Field

from filedrop.schemas.common import CamelModel


class BucketListResponse(CamelModel):
    """Response for GET /buckets."""

    success: bool = True
    buckets: list[str] = Field(..., description="Bound bucket names in binding order")
    default: str | None = Field(default=None, description="Bucket used when none is given")

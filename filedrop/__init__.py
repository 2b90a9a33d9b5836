"""filedrop: file upload and browsing service over bucketed object storage."""

__version__ = "1.0.0"

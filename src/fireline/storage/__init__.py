"""Object storage facade."""

from .api import ObjectListing, ObjectMetadata, Storage

__all__ = ["ObjectListing", "ObjectMetadata", "Storage"]

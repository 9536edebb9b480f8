from __future__ import annotations


class GalleryDomainError(Exception):
    """Base exception for gallery listing and deletion."""


class GalleryEntryNotFoundError(GalleryDomainError):
    pass


class GalleryValidationError(GalleryDomainError):
    pass


class GalleryStoreError(GalleryDomainError):
    pass

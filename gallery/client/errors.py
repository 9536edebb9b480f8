from __future__ import annotations


class GalleryClientError(Exception):
    """Base exception for everything the gallery client surfaces."""


class GalleryTransportError(GalleryClientError):
    """Network unreachable, timeout, or an unusable response body."""


class GalleryResponseError(GalleryTransportError):
    pass


class GalleryValidationError(GalleryClientError):
    pass


class GalleryUnauthorizedError(GalleryClientError):
    pass


class GalleryEntryNotFoundError(GalleryClientError):
    pass


class GalleryServerError(GalleryClientError):
    pass


class GalleryResolutionError(GalleryClientError):
    pass

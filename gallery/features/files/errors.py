from __future__ import annotations


class ResourceError(Exception):
    """Base exception for file reference resolution."""


class MissingProviderCredentialError(ResourceError):
    pass


class ResourceResolutionError(ResourceError):
    pass

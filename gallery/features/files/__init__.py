from __future__ import annotations

from .errors import MissingProviderCredentialError, ResourceError, ResourceResolutionError
from .locator import FileProvider, LocatedFile, ResourceLocator
from .service import default_providers, open_file, resolve_bot_token

__all__ = [
    "FileProvider",
    "LocatedFile",
    "MissingProviderCredentialError",
    "ResourceError",
    "ResourceLocator",
    "ResourceResolutionError",
    "default_providers",
    "open_file",
    "resolve_bot_token",
]

from .base import Base
from .models import GalleryEntry

__all__ = [
    "Base",
    "GalleryEntry",
]

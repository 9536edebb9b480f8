from .gallery import GalleryEntry

__all__ = [
    "GalleryEntry",
]

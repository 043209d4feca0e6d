"""
Domain subpackage for photo galleries.
"""

from .models import GalleryCreate, GalleryUpdate, PhotoGallery

__all__ = ["GalleryCreate", "GalleryUpdate", "PhotoGallery"]

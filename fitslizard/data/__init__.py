"""FITS image loading."""
from .load_image import ImageRecord, load_image

__all__ = ["ImageRecord", "load_image"]

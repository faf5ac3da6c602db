"""Tool adapters for external utilities."""
from .exiftool import ExifTool

__all__ = ["ExifTool"]

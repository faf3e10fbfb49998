"""
File Transfer Layer.

This package is responsible for all file operations on downloaded content:
streaming downloads, archive extraction and override copying.
"""

from .downloader import Downloader
from .extractor import copy_overrides, extract_archive, load_manifest

__all__ = ["Downloader", "copy_overrides", "extract_archive", "load_manifest"]

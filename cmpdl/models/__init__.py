"""
Data Models Layer.

This package contains Pydantic models and dataclasses that define the core
data structures used throughout the application: configuration, catalog
records, the modpack manifest, download tasks and statistics.
"""

from .config import InstallConfig
from .records import (
    DownloadTask,
    FileLink,
    FileRecord,
    FileReference,
    Manifest,
    ProjectRecord,
)
from .stats import DownloadStats

__all__ = [
    "DownloadStats",
    "DownloadTask",
    "FileLink",
    "FileRecord",
    "FileReference",
    "InstallConfig",
    "Manifest",
    "ProjectRecord",
]

"""
Pydantic models for catalog records and the modpack manifest, plus the small
dataclasses that carry work between pipeline steps.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class FileRecord(BaseModel):
    """One downloadable file belonging to a project."""

    file_id: int = Field(alias="id")
    file_name: str = Field(default="", alias="fileName")
    download_url: str = Field(alias="downloadUrl")
    display_version: str = Field(default="", alias="displayName")
    page_url: str = ""

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True
        frozen = True


class ProjectRecord(BaseModel):
    """A catalog project with its known files, most recent first."""

    identifier: str = Field(alias="id")
    slug: str = ""
    name: str = ""
    files: tuple[FileRecord, ...] = Field(default=(), alias="latestFiles")
    default_file_id: Optional[int] = Field(default=None, alias="defaultFileId")

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True
        frozen = True
        coerce_numbers_to_str = True

    def find_file(self, file_id: int) -> Optional[FileRecord]:
        """Returns the known file with the given ID, if any."""
        return next((f for f in self.files if f.file_id == file_id), None)


class ModLoader(BaseModel):
    id: str


class MinecraftInfo(BaseModel):
    version: str
    mod_loaders: list[ModLoader] = Field(default_factory=list, alias="modLoaders")

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True


class FileReference(BaseModel):
    """A manifest entry pointing at one file of one catalog project."""

    project_id: int = Field(alias="projectID")
    file_id: int = Field(alias="fileID")

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True


class Manifest(BaseModel):
    """The `manifest.json` document bundled in a modpack archive."""

    minecraft: MinecraftInfo
    files: list[FileReference] = Field(default_factory=list)
    overrides: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    author: Optional[str] = None

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True


@dataclass(frozen=True)
class FileLink:
    """A file link scraped from a project's file listing page."""

    url: str
    display_version: str


@dataclass(frozen=True)
class DownloadTask:
    """A single pending transfer of one URL to one local path."""

    source_url: str
    destination_path: Path
    display_label: str

"""
Modpack archive handling: zip extraction, manifest loading and copying the
bundled override files into the game directory.
"""

import asyncio
import json
import logging
import shutil
import zipfile
from pathlib import Path

from pydantic import ValidationError

from cmpdl.exceptions import ArchiveError, ManifestError
from cmpdl.models.records import Manifest

log = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "manifest.json"


def _extract_all(archive_path: Path, target_dir: Path) -> int:
    with zipfile.ZipFile(archive_path) as zf:
        zf.extractall(target_dir)
        return len(zf.infolist())


async def extract_archive(archive_path: Path, target_dir: Path) -> None:
    """
    Extracts a zip archive into `target_dir`.

    Raises:
        ArchiveError: If the archive is unreadable, corrupt or uses an
            unsupported compression method.
    """
    try:
        count = await asyncio.to_thread(_extract_all, archive_path, target_dir)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        NotImplementedError,
        OSError,
    ) as e:
        raise ArchiveError(f"Can't extract '{archive_path.name}': {e}") from e
    log.debug(f"Extracted {count} entries into '{target_dir}'.")


def load_manifest(path: Path) -> Manifest:
    """
    Parses a modpack manifest file.

    Raises:
        ManifestError: If the file is missing, is not JSON, or lacks required fields.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"The modpack has no {path.name}.") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestError(f"{path.name} is not valid JSON: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"{path.name} is malformed:\n{e}") from e


def _copy_tree(source_dir: Path, destination_dir: Path) -> int:
    copied = 0

    def copy_and_count(src, dst):
        nonlocal copied
        copied += 1
        return shutil.copy2(src, dst)

    shutil.copytree(
        source_dir, destination_dir, copy_function=copy_and_count, dirs_exist_ok=True
    )
    return copied


async def copy_overrides(source_dir: Path, destination_dir: Path) -> int:
    """
    Recursively copies override files, replacing files that already exist.

    Returns:
        The number of files copied.

    Raises:
        ManifestError: If the overrides directory is missing from the archive.
        ArchiveError: If copying fails.
    """
    if not source_dir.is_dir():
        raise ManifestError(
            f"Overrides folder '{source_dir.name}' named in the manifest is missing"
            " from the archive."
        )
    try:
        return await asyncio.to_thread(_copy_tree, source_dir, destination_dir)
    except (shutil.Error, OSError) as e:
        raise ArchiveError(f"Can't copy overrides: {e}") from e

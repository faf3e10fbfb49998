"""
Utilities for naming and creating output directories.
"""

import re
from pathlib import Path

from cmpdl.exceptions import DirectoryExistsError

_ILLEGAL_CHARS = re.compile(r'[/\\?%*:|"<>]')


def sanitize_dir_name(name: str) -> str:
    """Replaces characters that are illegal in folder names with '-'."""
    return _ILLEGAL_CHARS.sub("-", name)


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def create_fresh_dir(directory_path: Path) -> None:
    """
    Creates a directory that must not exist yet.

    Raises:
        DirectoryExistsError: If anything already exists at the path.
    """
    try:
        directory_path.mkdir()
    except FileExistsError as e:
        raise DirectoryExistsError(directory_path) from e

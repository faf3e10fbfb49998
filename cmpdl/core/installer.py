"""
The main orchestrator: resolves a project, downloads and unpacks its archive,
then fetches every mod listed in the manifest and assembles `.minecraft`.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from pathvalidate import sanitize_filename
from rich.markup import escape

from cmpdl.cli.progress_manager import ProgressManager
from cmpdl.exceptions import ManifestError
from cmpdl.media import Downloader, copy_overrides, extract_archive, load_manifest
from cmpdl.media.extractor import MANIFEST_FILE_NAME
from cmpdl.models.config import InstallConfig
from cmpdl.models.records import DownloadTask, FileReference, Manifest
from cmpdl.models.stats import DownloadStats
from cmpdl.utils.formatting import format_counter
from cmpdl.utils.path import create_dir, create_fresh_dir

from .catalog import CatalogResolver

log = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """What a finished run produced, for the completion summary."""

    project_dir: Path
    dot_minecraft: Path
    manifest: Manifest
    stats: DownloadStats


class ModpackInstaller:
    """Orchestrates the entire install of one modpack."""

    def __init__(
        self,
        config: InstallConfig,
        catalog: CatalogResolver,
        progress_manager: ProgressManager,
        downloader: Downloader | None = None,
    ):
        self.config = config
        self.catalog = catalog
        self.progress_manager = progress_manager
        self.downloader = downloader or Downloader(
            config.user_agent,
            chunk_size=config.chunk_size,
            connect_timeout=config.connect_timeout,
        )
        self.stats = DownloadStats()

    async def install(self, reference: str) -> InstallResult:
        """
        Runs every step for one project reference. Any error aborts the run and
        leaves the partially created output behind.
        """
        log.info("Searching for project main file")
        project = await self.catalog.resolve_project(reference)
        primary = await self.catalog.primary_file(project)

        output_root = Path(self.config.output_dir) / self.catalog.output_root
        create_dir(output_root)
        project_dir = output_root / self.catalog.project_dir_name(project, primary)
        create_fresh_dir(project_dir)
        project_dir = project_dir.resolve()

        archive_name = (
            sanitize_filename(primary.file_name) or f"{project.identifier}.zip"
        )
        archive_path = project_dir / archive_name
        log.info(
            f"Downloading project main file v.{escape(primary.display_version)}"
        )
        await self._download(
            DownloadTask(primary.download_url, archive_path, archive_name)
        )

        log.info("Extracting...")
        extracted_dir = project_dir / "extracted"
        await extract_archive(archive_path, extracted_dir)
        log.info("Extracted")

        manifest = load_manifest(extracted_dir / MANIFEST_FILE_NAME)

        dot_minecraft = project_dir / ".minecraft"
        create_fresh_dir(dot_minecraft)
        mods_dir = dot_minecraft / "mods"
        create_fresh_dir(mods_dir)

        log.info("Generating file list...")
        tasks = await self.build_download_tasks(manifest.files, mods_dir)
        log.info("Generated file list!")

        await self.download_all(tasks)

        if manifest.overrides:
            log.info("Copying overrides...")
            overrides_dir = self._overrides_dir(extracted_dir, manifest.overrides)
            self.stats.overrides_copied = await copy_overrides(
                overrides_dir, dot_minecraft
            )
            log.info("Copied overrides!")

        log.info("Finished!")
        return InstallResult(project_dir, dot_minecraft, manifest, self.stats)

    async def build_download_tasks(
        self, references: List[FileReference], mods_dir: Path
    ) -> List[DownloadTask]:
        """
        Resolves every manifest entry concurrently into a DownloadTask.

        The result has one task per reference, in manifest order.
        """

        async def resolve_single(reference: FileReference) -> DownloadTask:
            record = await self.catalog.resolve_file(
                reference.project_id, reference.file_id
            )
            file_name = sanitize_filename(record.file_name) or (
                f"{reference.project_id}-{reference.file_id}.jar"
            )
            return DownloadTask(
                source_url=record.download_url,
                destination_path=mods_dir / file_name,
                display_label=file_name,
            )

        return list(await asyncio.gather(*(resolve_single(r) for r in references)))

    async def download_all(self, tasks: List[DownloadTask]) -> None:
        """Downloads the tasks one after another, in order."""
        total = len(tasks)
        log.info(f"There's {total} mods to download...")
        log.info("Starting downloading mods...")
        for index, task in enumerate(tasks, 1):
            await self._download(task, format_counter(index, total))
        log.info("Finished downloading")

    async def _download(self, task: DownloadTask, counter: str = "") -> None:
        size = await self.downloader.download(task, self.progress_manager, counter)
        self.stats.record_download(size)

    @staticmethod
    def _overrides_dir(extracted_dir: Path, overrides: str) -> Path:
        """Resolves the overrides folder, which must stay inside the archive."""
        overrides_dir = (extracted_dir / overrides).resolve()
        if not overrides_dir.is_relative_to(extracted_dir.resolve()):
            raise ManifestError(
                f"Overrides folder '{overrides}' points outside the modpack archive."
            )
        return overrides_dir

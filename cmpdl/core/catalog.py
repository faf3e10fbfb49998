"""
Catalog resolvers: turn a project reference into project and file records.

Two interchangeable backends implement the same interface, one driven by the
JSON addon API and one by scraping the catalog's HTML pages, so the install
pipeline never needs to know which one it is talking to.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from pydantic import ValidationError

from cmpdl.api.client import CatalogClient
from cmpdl.exceptions import (
    CatalogFormatError,
    FileNotFoundInProjectError,
    NotFoundError,
    ProjectNotFoundError,
)
from cmpdl.models.config import InstallConfig
from cmpdl.models.records import FileLink, FileRecord, ProjectRecord
from cmpdl.utils.path import sanitize_dir_name
from cmpdl.web.file_list import (
    FileListScraper,
    download_url_from_file_url,
    file_id_from_url,
)

log = logging.getLogger(__name__)


class CatalogResolver(ABC):
    """Common interface of every catalog backend."""

    output_root = "modpacks"

    def __init__(self, client: CatalogClient):
        self.client = client

    @abstractmethod
    async def resolve_project(self, reference: str) -> ProjectRecord:
        """Looks up a project by slug (or backend-specific identifier)."""

    @abstractmethod
    async def resolve_file(self, project_id: int, file_id: int) -> FileRecord:
        """Looks up one file of one project."""

    async def primary_file(self, project: ProjectRecord) -> FileRecord:
        """Returns the project's default file, or its most recent one."""
        if project.default_file_id is not None:
            default = project.find_file(project.default_file_id)
            if default is not None:
                return default
        if project.files:
            return project.files[0]
        raise NotFoundError(
            f"Project '{project.slug or project.identifier}' has no files."
        )

    def project_dir_name(self, project: ProjectRecord, primary: FileRecord) -> str:
        return self._dir_name(project, primary.display_version or primary.file_name)

    @staticmethod
    def _dir_name(project: ProjectRecord, name: str) -> str:
        """
        Sanitizes a folder name, falling back to the project identifier when
        nothing usable is left (empty, or only dots and spaces).
        """
        for candidate in (name, project.identifier):
            candidate = sanitize_dir_name(candidate)
            if candidate.strip(" ."):
                return candidate
        return sanitize_dir_name(f"project-{project.identifier}")

    async def close(self) -> None:
        await self.client.close()


class ApiCatalog(CatalogResolver):
    """Resolves projects and files through the JSON addon API."""

    output_root = "modpacks"

    def __init__(self, client: CatalogClient):
        super().__init__(client)
        self._projects: Dict[int, asyncio.Task] = {}

    async def resolve_project(self, reference: str) -> ProjectRecord:
        """
        Finds a project by exact slug match, paging through search results.

        Purely numeric references are fetched directly by project ID.

        Raises:
            ProjectNotFoundError: If no page contains a matching slug.
        """
        if reference.isdigit():
            return await self._get_project(int(reference))

        async for page in self.client.iter_search_pages(reference):
            for record in page:
                if record.get("slug") == reference:
                    return self._parse_project(record)
        raise ProjectNotFoundError(reference)

    async def resolve_file(self, project_id: int, file_id: int) -> FileRecord:
        """
        Finds a file among the project's latest files, then among all its files.

        Raises:
            FileNotFoundInProjectError: If the file is in neither list.
        """
        project = await self._get_project(project_id)
        if (file := project.find_file(file_id)) is not None:
            return file

        log.debug(
            f"File {file_id} is not among the latest files of project {project_id}, "
            "fetching the full file list."
        )
        for item in await self.client.fetch_project_files(project_id):
            if item.get("id") == file_id:
                return self._parse_file(item)
        raise FileNotFoundInProjectError(file_id, project_id)

    async def _get_project(self, project_id: int) -> ProjectRecord:
        """Fetches a project once per run; concurrent callers share the request."""
        task = self._projects.get(project_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch_project(project_id))
            self._projects[project_id] = task
        else:
            log.debug(f"Reusing fetched project {project_id}.")
        return await task

    async def _fetch_project(self, project_id: int) -> ProjectRecord:
        try:
            payload = await self.client.fetch_project(project_id)
        except NotFoundError as e:
            raise ProjectNotFoundError(str(project_id)) from e
        return self._parse_project(payload)

    @staticmethod
    def _parse_project(payload: Dict[str, Any]) -> ProjectRecord:
        try:
            return ProjectRecord.model_validate(payload)
        except ValidationError as e:
            raise CatalogFormatError(f"Unexpected project payload: {e}") from e

    @staticmethod
    def _parse_file(payload: Dict[str, Any]) -> FileRecord:
        try:
            return FileRecord.model_validate(payload)
        except ValidationError as e:
            raise CatalogFormatError(f"Unexpected file payload: {e}") from e


class WebCatalog(CatalogResolver):
    """Resolves projects and files by scraping the catalog's HTML pages."""

    output_root = "download"

    def __init__(self, client: CatalogClient, base_url: str):
        super().__init__(client)
        self.base_url = base_url.rstrip("/")
        self.scraper = FileListScraper(client)

    def listing_url(self, slug: str) -> str:
        return f"{self.base_url}/projects/{slug}/files"

    def file_url(self, project_id: int | str, file_id: int) -> str:
        return f"{self.base_url}/projects/{project_id}/files/{file_id}"

    async def resolve_project(self, reference: str) -> ProjectRecord:
        """
        Builds a project record from the links on its file listing page.

        Raises:
            ProjectNotFoundError: If the listing page is missing or lists no files.
        """
        try:
            links = await self.scraper.list_files(self.listing_url(reference))
        except NotFoundError as e:
            raise ProjectNotFoundError(reference) from e
        if not links:
            raise ProjectNotFoundError(reference)

        files = tuple(self._file_from_link(link) for link in links)
        return ProjectRecord(
            identifier=reference,
            slug=reference,
            files=files,
            default_file_id=files[0].file_id,
        )

    async def primary_file(self, project: ProjectRecord) -> FileRecord:
        """Returns the latest file, with its name read from the detail page."""
        primary = await super().primary_file(project)
        if primary.file_name:
            return primary
        name = await self.scraper.fetch_file_name(primary.page_url)
        if not name:
            name = f"{project.slug}-{primary.file_id}.zip"
            log.debug(f"No file name on {primary.page_url}, using '{name}'.")
        return primary.model_copy(update={"file_name": name})

    async def resolve_file(self, project_id: int, file_id: int) -> FileRecord:
        """
        Reads one file's name from its detail page.

        Raises:
            FileNotFoundInProjectError: If the detail page does not exist.
            CatalogFormatError: If the page shows no file name.
        """
        url = self.file_url(project_id, file_id)
        try:
            name = await self.scraper.fetch_file_name(url)
        except NotFoundError as e:
            raise FileNotFoundInProjectError(file_id, project_id) from e
        if not name:
            raise CatalogFormatError(f"No file name found on {url}")
        return FileRecord(
            file_id=file_id,
            file_name=name,
            download_url=download_url_from_file_url(url),
            display_version=name,
            page_url=url,
        )

    def project_dir_name(self, project: ProjectRecord, primary: FileRecord) -> str:
        return self._dir_name(project, f"{project.slug} {primary.display_version}")

    @staticmethod
    def _file_from_link(link: FileLink) -> FileRecord:
        file_id = file_id_from_url(link.url)
        if file_id is None:
            raise CatalogFormatError(f"File link without a file ID: {link.url}")
        return FileRecord(
            file_id=file_id,
            download_url=download_url_from_file_url(link.url),
            display_version=link.display_version,
            page_url=link.url,
        )


def create_catalog(config: InstallConfig) -> CatalogResolver:
    """Builds the catalog backend selected in the configuration."""
    if config.catalog == "web":
        client = CatalogClient(
            config.web_base_url,
            config.user_agent,
            connect_timeout=config.connect_timeout,
        )
        return WebCatalog(client, config.web_base_url)

    client = CatalogClient(
        config.api_base_url,
        config.user_agent,
        game_id=config.game_id,
        section_id=config.section_id,
        page_size=config.page_size,
        connect_timeout=config.connect_timeout,
    )
    return ApiCatalog(client)

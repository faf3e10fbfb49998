"""
Async HTTP client for the catalog: plain GET requests, HTTP status bucketing,
and the JSON endpoints of the addon API.
"""

import json
import logging
import time
from typing import Any, AsyncGenerator, Dict, List, Optional

import aiohttp

from cmpdl.exceptions import (
    CatalogFormatError,
    ClientError,
    NetworkError,
    NotFoundError,
    ServerError,
)

log = logging.getLogger(__name__)


def check_status(status: int, url: str) -> None:
    """Maps an unsuccessful HTTP status to the matching catalog error."""
    if status == 404:
        raise NotFoundError(f"Not found: {url}")
    if status >= 500:
        raise ServerError(status, url)
    if status >= 400:
        raise ClientError(status, url)


class CatalogClient:
    """
    Async client for the addon catalog.

    Serves both the JSON API (relative endpoints under `base_url`) and
    arbitrary absolute page URLs for HTML scraping.
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        game_id: int = 432,
        section_id: int = 4471,
        page_size: int = 20,
        connect_timeout: float = 0,
    ):
        """
        Initializes the client.

        Args:
            base_url: Root of the JSON API, without a trailing slash.
            user_agent: Value of the User-Agent header sent with every request.
            game_id: Catalog game the search is restricted to.
            section_id: Catalog section (modpacks) the search is restricted to.
            page_size: Number of search results requested per page.
            connect_timeout: Seconds allowed to establish a connection; 0 disables it.
        """
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.game_id = game_id
        self.section_id = section_id
        self.page_size = page_size
        self.connect_timeout = connect_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(
                    total=None, connect=self.connect_timeout or None
                ),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_text(self, url: str, **params: Any) -> str:
        """
        Issues one GET request and returns the response body as text.

        Raises:
            NotFoundError: On HTTP 404.
            ClientError: On any other 4xx status.
            ServerError: On 5xx statuses.
            NetworkError: If the request fails at the transport level.
        """
        await self._initialize_session()
        start_time = time.monotonic()
        try:
            async with self._session.get(url, params=params or None) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"GET {r.url} -> {r.status} ({duration_ms:.0f} ms)")
                check_status(r.status, str(r.url))
                return await r.text()
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

    async def api_call(self, endpoint: str, **params: Any) -> Any:
        """Calls a JSON API endpoint relative to the base URL."""
        url = f"{self.base_url}/{endpoint}"
        body = await self.fetch_text(url, **params)
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise CatalogFormatError(f"Invalid JSON from {url}: {e}") from e

    async def search_addons(self, search_filter: str, index: int) -> List[Dict[str, Any]]:
        """Fetches one page of search results starting at `index`."""
        results = await self.api_call(
            "addon/search",
            gameId=self.game_id,
            categoryId=0,
            searchFilter=search_filter,
            pageSize=self.page_size,
            index=index,
            sort=1,
            sortDescending="true",
            sectionId=self.section_id,
        )
        if not isinstance(results, list):
            raise CatalogFormatError("Search endpoint did not return a list.")
        return results

    async def iter_search_pages(
        self, search_filter: str
    ) -> AsyncGenerator[List[Dict[str, Any]], None]:
        """
        Generator over search result pages.

        Windows advance by the page size from offset 0 and stop at the first
        empty page.
        """
        index = 0
        while True:
            page = await self.search_addons(search_filter, index)
            if not page:
                break
            yield page
            index += self.page_size

    async def fetch_project(self, project_id: int | str) -> Dict[str, Any]:
        return await self.api_call(f"addon/{project_id}")

    async def fetch_project_files(self, project_id: int | str) -> List[Dict[str, Any]]:
        files = await self.api_call(f"addon/{project_id}/files")
        if not isinstance(files, list):
            raise CatalogFormatError(
                f"Files endpoint for project {project_id} did not return a list."
            )
        return files

"""
Fetches and parses catalog web pages to recover file links and file names
for projects that are browsed through HTML instead of the JSON API.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from cmpdl.api.client import CatalogClient
from cmpdl.models.records import FileLink

log = logging.getLogger(__name__)

FILE_LINK_SELECTOR = ".twitch-link"
FILE_NAME_SELECTOR = ".details-info .info-data.overflow-tip"

_FILE_ID_REGEX = re.compile(r"/files/(?P<file_id>\d+)")


class FileListScraper:
    """
    Scrapes a project's file listing and per-file detail pages.

    All requests go through the shared CatalogClient so that HTTP statuses
    are classified the same way as for the JSON API.
    """

    def __init__(self, client: CatalogClient):
        self.client = client

    async def list_files(self, url: str) -> List[FileLink]:
        """
        Returns every file link on the listing page, in document order.

        The first element is the most recent file by page convention.
        """
        html = await self.client.fetch_text(url)
        links = self.parse_file_list(html, url)
        log.debug(f"Found {len(links)} file links on {url}")
        return links

    @staticmethod
    def parse_file_list(html: str, page_url: str) -> List[FileLink]:
        soup = BeautifulSoup(html, "html.parser")
        return [
            FileLink(
                url=urljoin(page_url, anchor.get("href", "")),
                display_version=anchor.get_text().strip(),
            )
            for anchor in soup.select(FILE_LINK_SELECTOR)
        ]

    async def fetch_file_name(self, file_url: str) -> Optional[str]:
        """Reads the file name shown on a file's detail page."""
        html = await self.client.fetch_text(file_url)
        return self.parse_file_name(html)

    @staticmethod
    def parse_file_name(html: str) -> Optional[str]:
        soup = BeautifulSoup(html, "html.parser")
        element = soup.select_one(FILE_NAME_SELECTOR)
        if element is None:
            return None
        return element.get_text().strip() or None


def file_id_from_url(file_url: str) -> Optional[int]:
    """Extracts the numeric file ID from a '/files/<id>' URL."""
    match = _FILE_ID_REGEX.search(file_url)
    return int(match.group("file_id")) if match else None


def download_url_from_file_url(file_url: str) -> str:
    """Turns a file detail page URL into the URL that serves the file itself."""
    return re.sub(r"/files/", "/download/", file_url.rstrip("/"), count=1) + "/file"

"""
Handles the low-level downloading of files over HTTP, streaming each response
body to disk while feeding the progress display.
"""

import asyncio
import logging

import aiofiles
import aiohttp

from cmpdl.cli.progress_manager import ProgressManager
from cmpdl.exceptions import DownloadError
from cmpdl.models.records import DownloadTask

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(
    user_agent: str, connect_timeout: float = 0
) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            ttl_dns_cache=600,  # 10 minutes
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, connect=connect_timeout or None)
        _connection_pool = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
        log.debug("Created download connection pool.")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """A low-level streaming file downloader. Failures are never retried."""

    def __init__(
        self, user_agent: str, chunk_size: int = 65536, connect_timeout: float = 0
    ):
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self.connect_timeout = connect_timeout

    async def download(
        self,
        task: DownloadTask,
        progress_manager: ProgressManager | None = None,
        counter: str = "",
    ) -> int:
        """
        Streams `task.source_url` into `task.destination_path`, overwriting it.

        Args:
            task: What to download and where to put it.
            progress_manager: Display to report progress to, if any.
            counter: Prefix shown before the label, e.g. '(3/120) '.

        Returns:
            The number of bytes written.

        Raises:
            DownloadError: On a network error or an unsuccessful HTTP status.
        """
        session = await get_connection_pool(self.user_agent, self.connect_timeout)
        task_id = None
        bytes_downloaded = 0
        try:
            async with session.get(task.source_url, allow_redirects=True) as response:
                response.raise_for_status()

                if progress_manager:
                    task_id = progress_manager.add_transfer(
                        task.display_label, response.content_length, counter
                    )

                async with aiofiles.open(task.destination_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
                        if progress_manager:
                            progress_manager.update_transfer(task_id, bytes_downloaded)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            if progress_manager:
                progress_manager.discard_transfer(task_id)
            raise DownloadError(
                f"Failed to download '{task.display_label}' from {task.source_url}: {e}"
            ) from e

        if progress_manager:
            progress_manager.finish_transfer(task_id)
        log.debug(
            f"Downloaded {bytes_downloaded} bytes to '{task.destination_path}'."
        )
        return bytes_downloaded

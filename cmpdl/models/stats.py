"""
Dataclass for tracking install session statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks what a single install run has transferred and copied."""

    files_downloaded: int = 0
    total_size_downloaded: int = 0
    overrides_copied: int = 0
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_download(self, size: int) -> None:
        self.files_downloaded += 1
        self.total_size_downloaded += size

    @property
    def elapsed(self) -> float:
        """Seconds since the run started."""
        return time.monotonic() - self._start_time

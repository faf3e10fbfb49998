"""
Web Scraping Layer.

This package contains modules for fetching and parsing catalog web pages,
used when projects are browsed through HTML rather than the JSON API.
"""

from .file_list import FileListScraper

__all__ = ["FileListScraper"]

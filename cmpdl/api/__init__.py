"""
Catalog API Layer.

This package handles all HTTP communication with the addon catalog.
"""

from .client import CatalogClient, check_status

__all__ = ["CatalogClient", "check_status"]

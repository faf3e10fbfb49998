"""
Core application engine for orchestrating the install process.

This package contains the primary logic. The `ModpackInstaller` runs the
install pipeline, delegating every catalog lookup to a `CatalogResolver`
backend (JSON API or scraped web pages).
"""

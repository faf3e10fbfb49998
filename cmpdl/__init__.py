"""cmpdl: download and assemble modpacks from a catalog project reference."""

__version__ = "1.0.0"

"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from cmpdl import __version__

CATALOG_CHOICES = ("api", "web")

DEFAULT_API_BASE_URL = "https://addons-ecs.forgesvc.net/api/v2"
DEFAULT_WEB_BASE_URL = "https://www.curseforge.com"


class InstallConfig(BaseModel):
    """A validated configuration model for the application."""

    # Catalog selection & endpoints
    catalog: str = "api"
    api_base_url: str = DEFAULT_API_BASE_URL
    web_base_url: str = DEFAULT_WEB_BASE_URL
    game_id: int = 432
    section_id: int = 4471
    page_size: int = 20

    # Transport settings
    user_agent: str = f"cmpdl/{__version__}"
    connect_timeout: float = 0
    chunk_size: int = 65536

    # Output
    output_dir: Path = Path(".")

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("catalog")
    @classmethod
    def validate_catalog(cls, v: str) -> str:
        v = v.lower()
        if v not in CATALOG_CHOICES:
            raise ValueError(
                f"Catalog must be one of {', '.join(CATALOG_CHOICES)}, got '{v}'."
            )
        return v

    @field_validator("api_base_url", "web_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures base URLs are absolute http(s) URLs without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must start with http:// or https://: {v}")
        return v.rstrip("/")

    @field_validator("game_id", "section_id")
    @classmethod
    def validate_positive_id(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Catalog IDs must be positive.")
        return v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Keeps the search window within what the search endpoint accepts."""
        if v < 1 or v > 50:
            raise ValueError("Page size must be between 1 and 50.")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        if not v:
            raise ValueError("User agent cannot be empty.")
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Connect timeout cannot be negative.")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v < 1024:
            raise ValueError("Chunk size must be at least 1024 bytes.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}

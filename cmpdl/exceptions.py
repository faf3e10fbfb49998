"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class CmpdlError(Exception):
    """Base exception for all application-specific errors."""


class NotFoundError(CmpdlError):
    """Raised when the catalog has no record for the requested resource."""


class ProjectNotFoundError(NotFoundError):
    """Raised when a project reference matches nothing in the catalog."""

    def __init__(self, reference: str):
        super().__init__(f"Can't find project '{reference}'.")
        self.reference = reference


class FileNotFoundInProjectError(NotFoundError):
    """Raised when a file ID is absent from both the latest and full file lists."""

    def __init__(self, file_id: int, project_id: int):
        super().__init__(f"File {file_id} not found in project {project_id}.")
        self.file_id = file_id
        self.project_id = project_id


class CatalogHTTPError(CmpdlError):
    """Raised when the catalog answers with an unsuccessful HTTP status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} from {url}")
        self.status = status
        self.url = url


class ClientError(CatalogHTTPError):
    """Raised for 4xx responses other than 404."""


class ServerError(CatalogHTTPError):
    """Raised for 5xx responses."""


class NetworkError(CmpdlError):
    """Raised when the catalog cannot be reached at the transport level."""


class CatalogFormatError(CmpdlError):
    """Raised when a catalog payload or page does not have the expected shape."""


class DirectoryExistsError(CmpdlError):
    """Raised when an output directory that must be fresh already exists."""

    def __init__(self, path):
        super().__init__(
            f"There's already a folder at '{path}'. To download it again, delete"
            " this folder."
        )
        self.path = path


class DownloadError(CmpdlError):
    """Raised when a file cannot be fully downloaded."""


class ArchiveError(CmpdlError):
    """Raised when a modpack archive cannot be extracted."""


class ManifestError(CmpdlError):
    """Raised when the modpack manifest is missing or malformed."""


class ConfigurationError(CmpdlError):
    """Raised for issues related to configuration loading or validation."""

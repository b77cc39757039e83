"""Custom exceptions for npl_deploy.

Provides clear, actionable error messages for local failures. Network
outcomes are never raised; they are returned as values and classified
into a DeploymentResult.
"""

from pathlib import Path


class NplDeployError(Exception):
    """Base exception for npl-deploy errors."""

    pass


class ConfigurationError(NplDeployError):
    """Raised when the deployment configuration is missing or invalid."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when no password is stored for a base URL and username."""

    def __init__(self, base_url: str, username: str):
        self.base_url = base_url
        self.username = username
        super().__init__(
            f"No stored password for {username} at {base_url}. "
            f"Run 'npl-deploy configure' or set NPL_DEPLOY_PASSWORD."
        )


class PlatformAPIError(NplDeployError):
    """Raised when a platform query (not a deployment step) fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DeploymentCancelled(NplDeployError):
    """Raised when the user declines the rapid deploy confirmation.

    A cancelled run is not attempted and has no DeploymentResult.
    """

    def __init__(self, message: str = "Deployment cancelled by user"):
        super().__init__(message)


class ArchiveError(NplDeployError):
    """Raised when the source tree cannot be packaged."""

    pass


class EmptySourcePathError(ArchiveError):
    def __init__(self):
        super().__init__("Source path is empty")


class SourcePathNotFoundError(ArchiveError):
    def __init__(self, path: Path | str):
        self.path = path
        super().__init__(f"Path {path} does not exist")


class SourcePathNotDirectoryError(ArchiveError):
    def __init__(self, path: Path | str):
        self.path = path
        super().__init__(f"Path {path} is not a directory")


class SourcePathNotReadableError(ArchiveError):
    def __init__(self, path: Path | str):
        self.path = path
        super().__init__(f"Path {path} is not readable")


class SourcePathOutsideProjectError(ArchiveError):
    def __init__(self, path: Path | str, project_path: Path | str):
        self.path = path
        self.project_path = project_path
        super().__init__(f"Path {path} is not in project {project_path}")

"""Configuration constants and paths for npl-deploy."""

from pathlib import Path
from typing import NamedTuple

# Deployment config file kept at the workspace root
CONFIG_FILE_NAME = "npl-deploy.json"

DEFAULT_BASE_URL = "https://portal.noumena.cloud"

# HTTP client configuration
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds
UPLOAD_TIMEOUT = 300.0  # seconds

# Remote API paths
AUTH_LOGIN_PATH = "/api/auth/login"
TENANTS_PATH = "/api/v1/tenants"
APPLICATIONS_PATH = "/api/v1/applications"

# Multipart field carrying the archive on deploy
ARCHIVE_FIELD_NAME = "npl_archive"
ARCHIVE_FILE_NAME = "npl_archive.zip"

# Environment variables
PASSWORD_ENV_VAR = "NPL_DEPLOY_PASSWORD"
CREDENTIALS_FILE_ENV_VAR = "NPL_DEPLOY_CREDENTIALS_FILE"
RICH_UI_ENV_VAR = "NPL_DEPLOY_RICH_UI"


class WorkspacePaths(NamedTuple):
    """Paths for npl-deploy configuration inside a workspace."""

    workspace_dir: Path
    config_file: Path


def get_paths(workspace: Path | None = None) -> WorkspacePaths:
    """Get standardized paths for the deployment config of a workspace."""
    workspace_dir = Path(workspace) if workspace is not None else Path.cwd()
    return WorkspacePaths(
        workspace_dir=workspace_dir,
        config_file=workspace_dir / CONFIG_FILE_NAME,
    )

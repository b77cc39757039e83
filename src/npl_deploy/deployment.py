"""
Deployment orchestration.

Sequences one deployment attempt: token, optional clear, archive, upload.
Each step runs strictly after the previous one and the first failure ends
the run with its classified DeploymentResult. Nothing is retried and a
successful clear is not compensated when the upload then fails.
"""

import inspect
import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

import httpx

from npl_deploy.build.archive import ArchiveBuilder
from npl_deploy.core.api.auth import TokenAcquirer, TokenResponse, auth_url_for
from npl_deploy.core.api.platform import PlatformClient, RemoteCallResult
from npl_deploy.core.credentials import CredentialManager
from npl_deploy.core.deploy_config import DeploymentConfigManager
from npl_deploy.core.exceptions import (
    ArchiveError,
    DeploymentCancelled,
    MissingCredentialError,
)
from npl_deploy.core.models import DeploymentConfig, DeploymentResult, DeploymentStatus

log = logging.getLogger(__name__)


class RapidDeployChoice(str, Enum):
    """Answer from the rapid deploy confirmation gate."""

    PROCEED = "proceed"
    PROCEED_AND_REMEMBER = "proceed_and_remember"
    DECLINE = "decline"


ConfirmCallback = Callable[
    [DeploymentConfig], Union[RapidDeployChoice, Awaitable[RapidDeployChoice]]
]

# Upload status codes with a more specific hint than the raw response
_UPLOAD_FAILURE_HINTS = {
    401: "Failed to deploy due to unauthorized access.",
    404: "Could not find the server. Check the server base URL and application ID.",
    422: "Failed to process the deployment. Check the application logs on the platform for details.",
}


def classify_token_failure(response: TokenResponse) -> DeploymentResult:
    """Map a failed token request onto a DeploymentResult."""
    if response.transport_error:
        return DeploymentResult.CONNECTION_ERROR
    if response.status_code is not None and 400 <= response.status_code < 500:
        return DeploymentResult.AUTHORIZATION_ERROR
    return DeploymentResult.UNKNOWN_ERROR


def resolve_source_path(
    source_path: str, project_path: Optional[Union[str, Path]] = None
) -> str:
    """Resolve a relative source path against the project directory."""
    if not source_path or not source_path.strip():
        return ""
    source = Path(source_path).expanduser()
    if not source.is_absolute() and project_path is not None:
        source = Path(project_path) / source
    return str(source)


class DeploymentOrchestrator:
    """
    Runs deployments against the platform.

    All collaborators are injected; the orchestrator holds no state between
    runs, so concurrent runs share nothing but the remote application.
    Callers needing one deployment per target at a time must serialize.

    ``timeout`` applies to every request, uploads included; when unset,
    requests use DEFAULT_REQUEST_TIMEOUT and uploads UPLOAD_TIMEOUT.
    """

    def __init__(
        self,
        config_provider: Optional[DeploymentConfigManager] = None,
        credentials: Optional[CredentialManager] = None,
        *,
        confirm: Optional[ConfirmCallback] = None,
        archive_builder: Optional[ArchiveBuilder] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config_provider = config_provider or DeploymentConfigManager()
        self.credentials = credentials or CredentialManager()
        self.confirm = confirm
        self.archive_builder = archive_builder or ArchiveBuilder()
        self.timeout = timeout
        self.transport = transport
        self.log = logger or log

    async def run(self, workspace: Union[str, Path]) -> DeploymentStatus:
        """Deploy a workspace using its stored config and credential.

        Raises:
            DeploymentCancelled: The rapid deploy confirmation was declined.
                No network call has been made.
        """
        workspace = Path(workspace)
        config = self.config_provider.load(workspace)
        if config is None:
            return DeploymentStatus(
                result=DeploymentResult.VALIDATION_ERROR,
                message="No deployment configuration found",
                detail=str(self.config_provider.config_path(workspace)),
            )

        password = self.credentials.get_password(config.base_url, config.username)
        if not password:
            return DeploymentStatus(
                result=DeploymentResult.VALIDATION_ERROR,
                message=str(MissingCredentialError(config.base_url, config.username)),
            )

        if config.rapid_deploy and not config.skip_rapid_deploy_warning:
            await self._confirm_rapid_deploy(workspace, config)

        return await self.deploy(config, password, project_path=workspace)

    async def _confirm_rapid_deploy(
        self, workspace: Path, config: DeploymentConfig
    ) -> None:
        if self.confirm is None:
            raise DeploymentCancelled(
                "Rapid deploy clears all application data and needs confirmation"
            )

        choice = self.confirm(config)
        if inspect.isawaitable(choice):
            choice = await choice

        if choice == RapidDeployChoice.PROCEED_AND_REMEMBER:
            # Applies to later runs; this run keeps its frozen config
            remembered = config.model_copy(update={"skip_rapid_deploy_warning": True})
            try:
                self.config_provider.save(workspace, remembered)
            except OSError as e:
                self.log.warning(f"Could not remember rapid deploy choice: {e}")
        elif choice != RapidDeployChoice.PROCEED:
            raise DeploymentCancelled()

    async def deploy(
        self,
        config: DeploymentConfig,
        password: str,
        project_path: Optional[Union[str, Path]] = None,
    ) -> DeploymentStatus:
        """Run token, clear, archive and upload for an already resolved target."""
        self.log.info(
            f"Starting deployment to {config.base_url} for app {config.app_name}..."
        )

        self.log.info("Authenticating...")
        acquirer = TokenAcquirer(
            auth_url_for(config.base_url), timeout=self.timeout, transport=self.transport
        )
        token_response = await acquirer.acquire(config.username, password)
        if not token_response.ok:
            return self._token_failure(token_response)
        self.log.info("Authentication successful")

        async with PlatformClient(
            config.base_url,
            token_response.token,
            timeout=self.timeout,
            transport=self.transport,
        ) as platform:
            if config.rapid_deploy:
                self.log.info("Clearing existing application...")
                cleared = await platform.clear_application(config.app_name)
                if not cleared.success:
                    return self._failure(
                        cleared, f"Failed to clear the application: {cleared.message}"
                    )
                self.log.info("Application cleared successfully")

            self.log.info("Creating deployment package...")
            source = resolve_source_path(config.source_path, project_path)
            try:
                archive = await self.archive_builder.build(source, project_path)
            except ArchiveError as e:
                self.log.error(f"Deployment failed: {e}")
                return DeploymentStatus(
                    result=DeploymentResult.VALIDATION_ERROR, message=str(e)
                )

            with archive:
                self.log.info(
                    f"Deployment package created ({round(archive.size / 1024)} KB)"
                )
                self.log.info("Uploading deployment package...")
                uploaded = await platform.upload_archive(config.app_name, archive)

        if not uploaded.success:
            hint = _UPLOAD_FAILURE_HINTS.get(uploaded.status_code)
            return self._failure(
                uploaded, hint or f"Failed to deploy the application: {uploaded.message}"
            )

        self.log.info("Deployment completed successfully!")
        return DeploymentStatus(
            result=DeploymentResult.SUCCESS,
            message=(
                "Successfully deployed. Application was cleared."
                if config.rapid_deploy
                else "Successfully deployed."
            ),
        )

    def _token_failure(self, response: TokenResponse) -> DeploymentStatus:
        result = classify_token_failure(response)
        if result == DeploymentResult.CONNECTION_ERROR:
            message = "Could not connect to the server. Check your network connection and server URL."
        elif result == DeploymentResult.AUTHORIZATION_ERROR:
            message = "Failed to retrieve authentication token. Check your credentials."
        else:
            message = "Authentication failed with an unexpected server response."

        self.log.error(f"Deployment failed: {message}")
        return DeploymentStatus(result=result, message=message, detail=response.cause)

    def _failure(self, call: RemoteCallResult, message: str) -> DeploymentStatus:
        self.log.error(f"Deployment failed: {message}")
        return DeploymentStatus(result=call.result, message=message, detail=call.message)

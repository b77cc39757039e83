"""
Authenticated calls against the platform application API.

Clear and deploy return a RemoteCallResult instead of raising; both share
one status classification. Tenant listing is a query used by the CLI and
raises PlatformAPIError on failure.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx
from pydantic import ValidationError

from npl_deploy.build.archive import Archive
from npl_deploy.config import (
    APPLICATIONS_PATH,
    ARCHIVE_FIELD_NAME,
    ARCHIVE_FILE_NAME,
    TENANTS_PATH,
    UPLOAD_TIMEOUT,
)
from npl_deploy.core.exceptions import PlatformAPIError
from npl_deploy.core.models import DeploymentResult, Tenant
from npl_deploy.core.utils.http import describe_response, get_httpx_client

log = logging.getLogger(__name__)


def classify_status(status_code: int) -> DeploymentResult:
    """Map an HTTP status from clear or deploy onto a DeploymentResult."""
    if status_code == 200:
        return DeploymentResult.SUCCESS
    if status_code == 401:
        return DeploymentResult.UNAUTHORIZED
    if 400 <= status_code < 500:
        return DeploymentResult.VALIDATION_ERROR
    return DeploymentResult.UNKNOWN_ERROR


@dataclass
class RemoteCallResult:
    result: DeploymentResult
    message: str
    status_code: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.result.is_success


class PlatformClient:
    """Bearer-authenticated client for one platform base URL.

    Owns a single httpx client for the lifetime of a deployment run; use it
    as an async context manager so the connection pool is closed.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def application_url(self, app_name: str, action: str) -> str:
        return f"{self.base_url}{APPLICATIONS_PATH}/{app_name}/{action}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = get_httpx_client(
                token=self.token, timeout=self.timeout, transport=self.transport
            )
        return self._client

    async def _send(self, action: str, request) -> RemoteCallResult:
        try:
            response = await request(self._get_client())
        except httpx.TransportError as e:
            message = f"Connection error: {type(e).__name__}: {e}"
            log.error(f"{action} failed: {message}")
            return RemoteCallResult(DeploymentResult.CONNECTION_ERROR, message)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = f"Error: {e}"
            log.error(f"{action} failed: {message}")
            return RemoteCallResult(DeploymentResult.UNKNOWN_ERROR, message)

        result = classify_status(response.status_code)
        if result.is_success:
            return RemoteCallResult(result, f"{action} succeeded", response.status_code)

        message = f"{action} failed: {describe_response(response)}"
        log.error(message)
        return RemoteCallResult(result, message, response.status_code)

    async def clear_application(self, app_name: str) -> RemoteCallResult:
        """Wipe the deployed state of an application."""
        url = self.application_url(app_name, "clear")
        log.debug(f"DELETE {url}")
        return await self._send("Clear application", lambda c: c.delete(url))

    async def upload_archive(self, app_name: str, archive: Archive) -> RemoteCallResult:
        """Submit the archive as the single multipart file field."""
        url = self.application_url(app_name, "deploy")
        files = {
            ARCHIVE_FIELD_NAME: (
                ARCHIVE_FILE_NAME,
                archive.data,
                "application/octet-stream",
            )
        }
        # Uploads get a longer default unless the caller chose a timeout
        timeout = self.timeout if self.timeout is not None else UPLOAD_TIMEOUT
        log.debug(f"POST {url} ({archive.size} bytes)")
        return await self._send(
            "Deploy",
            lambda c: c.post(url, files=files, timeout=timeout),
        )

    async def list_tenants(self) -> List[Tenant]:
        url = f"{self.base_url}{TENANTS_PATH}"
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise PlatformAPIError(f"Error retrieving tenants: {e}") from e

        if response.status_code != 200:
            raise PlatformAPIError(
                f"Failed to get tenants: {describe_response(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            return [Tenant.model_validate(item) for item in payload]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise PlatformAPIError(f"Failed to parse tenants response: {e}") from e

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

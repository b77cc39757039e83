"""
Password-grant token acquisition against the platform login endpoint.

The acquirer never raises: every outcome is returned as a TokenResponse so
the caller can classify it.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from npl_deploy.config import AUTH_LOGIN_PATH
from npl_deploy.core.utils.http import describe_response, get_httpx_client

log = logging.getLogger(__name__)


def auth_url_for(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{AUTH_LOGIN_PATH}"


@dataclass
class TokenResponse:
    """Result of a token request.

    Exactly one of these holds: ``token`` is set, ``transport_error`` is
    True, or ``status_code`` records the HTTP status that was rejected
    (200 when the body was unusable).
    """

    token: Optional[str] = None
    status_code: Optional[int] = None
    transport_error: bool = False
    cause: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.token)


class TokenAcquirer:
    """Exchanges a username and password for a short-lived bearer token."""

    def __init__(
        self,
        auth_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.auth_url = auth_url
        self.timeout = timeout
        self.transport = transport

    async def acquire(self, username: str, password: str) -> TokenResponse:
        form = {
            "grant_type": "password",
            "username": username,
            "password": password,
        }

        log.debug(f"Requesting token from {self.auth_url} for {username}")

        try:
            async with get_httpx_client(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(self.auth_url, data=form)
        except httpx.TransportError as e:
            cause = f"Error retrieving token: {type(e).__name__}: {e}"
            log.error(cause)
            return TokenResponse(transport_error=True, cause=cause)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            cause = f"Error during token request: {e}"
            log.error(cause)
            return TokenResponse(cause=cause)

        if response.status_code != 200:
            cause = f"Failed to get token: {describe_response(response)}"
            log.error(cause)
            return TokenResponse(status_code=response.status_code, cause=cause)

        try:
            token = response.json().get("access_token")
        except (json.JSONDecodeError, UnicodeDecodeError, AttributeError) as e:
            cause = f"Failed to parse token response: {e}"
            log.error(cause)
            return TokenResponse(status_code=response.status_code, cause=cause)

        if not isinstance(token, str) or not token:
            cause = "No access token found in response"
            log.error(cause)
            return TokenResponse(status_code=response.status_code, cause=cause)

        log.debug("Token acquired")
        return TokenResponse(token=token, status_code=response.status_code)

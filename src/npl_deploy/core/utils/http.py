"""HTTP utilities for platform API communication."""

from typing import Optional

import httpx

from npl_deploy.config import DEFAULT_REQUEST_TIMEOUT


def get_httpx_client(
    token: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create httpx AsyncClient, optionally authenticated with a bearer token.

    This provides a centralized place to manage authentication headers for
    all platform HTTP requests, avoiding repetitive manual header addition.

    Args:
        token: Bearer token. No Authorization header is added when empty.
        timeout: Request timeout in seconds. Defaults to DEFAULT_REQUEST_TIMEOUT.
        transport: Optional transport override (used by tests).

    Returns:
        Configured httpx.AsyncClient

    Example:
        async with get_httpx_client(token) as client:
            response = await client.delete(url)
    """
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    timeout_config = timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT
    return httpx.AsyncClient(
        timeout=timeout_config, headers=headers, transport=transport
    )


def describe_response(response: httpx.Response, limit: int = 500) -> str:
    """Render a response as 'HTTP <status> - <body>' for logs and diagnostics."""
    body = response.text[:limit] if response.content else ""
    if body:
        return f"HTTP {response.status_code} - {body}"
    return f"HTTP {response.status_code}"

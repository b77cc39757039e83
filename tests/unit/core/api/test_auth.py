"""Tests for password-grant token acquisition."""

from urllib.parse import parse_qs

import httpx
import pytest
from testutil import BASE_URL, PASSWORD, TOKEN, USERNAME, FakePlatform

from npl_deploy.core.api.auth import TokenAcquirer, TokenResponse, auth_url_for


def make_acquirer(platform: FakePlatform) -> TokenAcquirer:
    return TokenAcquirer(auth_url_for(BASE_URL), transport=platform.transport)


class TestAuthUrl:
    def test_auth_url_for(self):
        assert auth_url_for("https://x.test") == "https://x.test/api/auth/login"

    def test_auth_url_for_strips_trailing_slash(self):
        assert auth_url_for("https://x.test/") == "https://x.test/api/auth/login"


class TestTokenAcquirer:
    @pytest.mark.asyncio
    async def test_acquire_success(self, fake_platform):
        response = await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        assert response.ok
        assert response.token == TOKEN
        assert response.status_code == 200
        assert response.transport_error is False

    @pytest.mark.asyncio
    async def test_request_is_form_encoded_password_grant(self, fake_platform):
        await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        request = fake_platform.request_for("login")
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert "Authorization" not in request.headers
        assert request.content.startswith(b"grant_type=password&username=")
        assert parse_qs(request.content.decode()) == {
            "grant_type": ["password"],
            "username": [USERNAME],
            "password": [PASSWORD],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 500, 503])
    async def test_non_200_returns_no_token(self, fake_platform, status):
        fake_platform.login_status = status

        response = await make_acquirer(fake_platform).acquire(USERNAME, "wrong")

        assert not response.ok
        assert response.token is None
        assert response.status_code == status
        assert response.transport_error is False
        assert f"HTTP {status}" in response.cause

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, fake_platform):
        fake_platform.login_body = b"<html>not json</html>"

        response = await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        assert not response.ok
        assert response.status_code == 200
        assert "Failed to parse token response" in response.cause

    @pytest.mark.asyncio
    async def test_missing_access_token(self, fake_platform):
        fake_platform.login_body = b'{"token_type": "Bearer"}'

        response = await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        assert not response.ok
        assert response.cause == "No access token found in response"

    @pytest.mark.asyncio
    async def test_non_object_json(self, fake_platform):
        fake_platform.login_body = b'["access_token"]'

        response = await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        assert not response.ok
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError,
            httpx.ReadError,
            httpx.RemoteProtocolError,
            httpx.ConnectTimeout,
            httpx.ReadTimeout,
        ],
    )
    async def test_transport_failures(self, fake_platform, error):
        fake_platform.errors["login"] = error

        response = await make_acquirer(fake_platform).acquire(USERNAME, PASSWORD)

        assert not response.ok
        assert response.transport_error is True
        assert response.status_code is None
        assert error.__name__ in response.cause

    @pytest.mark.asyncio
    async def test_invalid_url_does_not_raise(self):
        acquirer = TokenAcquirer("not a url at all")

        response = await acquirer.acquire(USERNAME, PASSWORD)

        assert not response.ok


class TestTokenResponse:
    def test_ok_requires_token(self):
        assert TokenResponse(token="abc").ok
        assert not TokenResponse(token="").ok
        assert not TokenResponse(status_code=401).ok

"""
Test configuration and fixtures for npl-deploy tests.

Provides shared fixtures for:
- Workspaces with a source tree and a deployment config
- An in-memory secret store
- A fake platform served through httpx.MockTransport
- Environment variable isolation
"""

from pathlib import Path

import pytest
from testutil import BASE_URL, PASSWORD, USERNAME, FakePlatform, MemorySecretStore

from npl_deploy.core.credentials import CredentialManager
from npl_deploy.core.deploy_config import DeploymentConfigManager
from npl_deploy.core.models import DeploymentConfig


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from real credentials and env overrides."""
    monkeypatch.delenv("NPL_DEPLOY_PASSWORD", raising=False)
    monkeypatch.setenv(
        "NPL_DEPLOY_CREDENTIALS_FILE", str(tmp_path / "home" / "credentials.toml")
    )
    monkeypatch.setenv("LOG_LEVEL", "ERROR")


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def secret_store() -> MemorySecretStore:
    return MemorySecretStore({f"{BASE_URL}|{USERNAME}": PASSWORD})


@pytest.fixture
def credentials(secret_store: MemorySecretStore) -> CredentialManager:
    return CredentialManager(secret_store)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with a one-file NPL source tree under src/.

    Returns:
        Path to the workspace root.
    """
    root = tmp_path / "workspace"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.npl").write_text("package demo;\n")
    return root


@pytest.fixture
def deployment_config(workspace: Path) -> DeploymentConfig:
    return DeploymentConfig(
        base_url=BASE_URL,
        app_name="demo",
        username=USERNAME,
        source_path=str(workspace / "src"),
        rapid_deploy=False,
    )


@pytest.fixture
def write_config(workspace: Path):
    """Write a deployment config into the workspace."""

    def _write(config: DeploymentConfig) -> Path:
        return DeploymentConfigManager().save(workspace, config)

    return _write


@pytest.fixture
def mock_asyncio_run_coro():
    """Create a mock asyncio.run that executes coroutines."""

    def run_coro(coro):
        import asyncio

        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    return run_coro

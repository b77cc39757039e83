"""Interactive deployment configuration."""

import asyncio
from pathlib import Path
from typing import Optional

import questionary
import typer
from rich.console import Console
from rich.panel import Panel

from npl_deploy.config import DEFAULT_BASE_URL
from npl_deploy.core.credentials import CredentialManager
from npl_deploy.core.deploy_config import DeploymentConfigManager
from npl_deploy.core.exceptions import PlatformAPIError
from npl_deploy.core.models import DeploymentConfig

from .apps import fetch_tenants

console = Console()


def configure_command(
    project_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Workspace directory (default: current directory)"
    ),
):
    """Create or update the workspace deployment configuration."""
    workspace = Path(project_dir).resolve() if project_dir else Path.cwd()

    config_manager = DeploymentConfigManager()
    credentials = CredentialManager()
    existing = config_manager.load(workspace)

    try:
        base_url = questionary.text(
            "Platform base URL:",
            default=existing.base_url if existing else DEFAULT_BASE_URL,
        ).ask()
        if not base_url:
            _cancel()

        username = questionary.text(
            "Username (usually your email address):",
            default=existing.username if existing else "",
        ).ask()
        if not username:
            _cancel()

        password = questionary.password(
            "Password (will be stored securely):"
        ).ask()
        if not password:
            _cancel()
    except KeyboardInterrupt:
        _cancel()

    base_url = base_url.rstrip("/")

    try:
        with console.status("Authenticating and retrieving applications..."):
            tenants = asyncio.run(fetch_tenants(base_url, username, password))
    except PlatformAPIError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    credentials.store_password(base_url, username, password)

    choices = [
        questionary.Choice(f"{app.name} ({tenant.name})", app.id)
        for tenant in tenants
        for app in tenant.active_applications()
    ]
    if not choices:
        console.print(
            "[red]Error:[/red] No active applications found. "
            "Create an application on the platform first."
        )
        raise typer.Exit(1)

    try:
        app_id = questionary.select(
            "Select application to deploy to:",
            choices=choices,
            default=next(
                (c for c in choices if existing and c.value == existing.app_name),
                None,
            ),
        ).ask()
        if not app_id:
            _cancel()

        source_path = questionary.path(
            "NPL source folder to deploy:",
            default=existing.source_path if existing else str(workspace),
            only_directories=True,
        ).ask()
        if not source_path:
            _cancel()

        rapid_deploy = questionary.confirm(
            "Clear application data before each deployment?",
            default=existing.rapid_deploy if existing else False,
        ).ask()
        if rapid_deploy is None:
            _cancel()
    except KeyboardInterrupt:
        _cancel()

    config = DeploymentConfig(
        base_url=base_url,
        app_name=app_id,
        username=username,
        source_path=source_path,
        rapid_deploy=rapid_deploy,
        skip_rapid_deploy_warning=(
            existing.skip_rapid_deploy_warning if existing else False
        ),
    )
    config_file = config_manager.save(workspace, config)

    console.print(
        Panel(
            f"Deployment configuration saved to [bold]{config_file}[/bold]\n\n"
            f"Application: {app_id}\n"
            f"Source: {source_path}",
            title="✅ Configured",
            expand=False,
        )
    )
    console.print("\nNext: [bold]npl-deploy deploy[/bold]")


def logout_command(
    project_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Workspace directory (default: current directory)"
    ),
):
    """Remove the stored password for the configured account."""
    workspace = Path(project_dir).resolve() if project_dir else Path.cwd()

    config = DeploymentConfigManager().load(workspace)
    if config is None or not config.base_url or not config.username:
        console.print("No credentials found to clean")
        return

    CredentialManager().delete_password(config.base_url, config.username)
    console.print("Credentials cleaned successfully")


def _cancel():
    console.print("Configuration cancelled")
    raise typer.Exit(1)

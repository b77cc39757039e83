"""Tenant and application listing."""

import asyncio
from pathlib import Path
from typing import List, Optional

import httpx
import questionary
import typer
from rich.console import Console
from rich.table import Table

from npl_deploy.core.api.auth import TokenAcquirer, auth_url_for
from npl_deploy.core.api.platform import PlatformClient
from npl_deploy.core.credentials import CredentialManager
from npl_deploy.core.deploy_config import DeploymentConfigManager
from npl_deploy.core.exceptions import PlatformAPIError
from npl_deploy.core.models import Tenant

console = Console()


async def fetch_tenants(
    base_url: str,
    username: str,
    password: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Tenant]:
    """Log in and list the tenants visible to the account.

    Raises:
        PlatformAPIError: Login or tenant listing failed.
    """
    token_response = await TokenAcquirer(
        auth_url_for(base_url), transport=transport
    ).acquire(username, password)
    if not token_response.ok:
        raise PlatformAPIError(
            f"Failed to authenticate: {token_response.cause}",
            status_code=token_response.status_code,
        )

    async with PlatformClient(
        base_url, token_response.token, transport=transport
    ) as platform:
        return await platform.list_tenants()


def apps_command(
    project_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Workspace directory (default: current directory)"
    ),
):
    """List active applications available to the configured account."""
    workspace = Path(project_dir).resolve() if project_dir else Path.cwd()

    config = DeploymentConfigManager().load(workspace)
    if config is None:
        console.print(
            "[red]Error:[/red] No deployment configuration found. "
            "Run [bold]npl-deploy configure[/bold] first."
        )
        raise typer.Exit(1)

    password = CredentialManager().get_password(config.base_url, config.username)
    if not password:
        password = questionary.password(
            f"Enter your password for {config.username} at {config.base_url}:"
        ).ask()
        if not password:
            raise typer.Exit(1)

    try:
        with console.status("Retrieving tenants and applications..."):
            tenants = asyncio.run(
                fetch_tenants(config.base_url, config.username, password)
            )
    except PlatformAPIError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not tenants:
        console.print("No tenants found. You may not have access to any tenants.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Tenant", style="cyan")
    table.add_column("Application", style="bold")
    table.add_column("ID", overflow="fold")
    table.add_column("State", style="yellow")

    for tenant in tenants:
        for app in tenant.applications:
            marker = " (configured)" if app.id == config.app_name else ""
            table.add_row(tenant.name, f"{app.name}{marker}", app.id, app.state)

    console.print(table)

"""npl-deploy deploy command - Deploy the workspace to its configured application."""

import asyncio
from pathlib import Path
from typing import Optional

import questionary
import typer
from rich.console import Console
from rich.panel import Panel

from npl_deploy.core.credentials import CredentialManager
from npl_deploy.core.deploy_config import DeploymentConfigManager
from npl_deploy.core.exceptions import DeploymentCancelled
from npl_deploy.core.models import DeploymentConfig, DeploymentResult, DeploymentStatus
from npl_deploy.deployment import DeploymentOrchestrator, RapidDeployChoice

console = Console()

# Results for which the literal upstream message helps diagnosis
_SHOW_DETAIL = {
    DeploymentResult.CONNECTION_ERROR,
    DeploymentResult.AUTHORIZATION_ERROR,
    DeploymentResult.UNAUTHORIZED,
}


def deploy_command(
    project_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Workspace directory (default: current directory)"
    ),
):
    """
    Deploy the workspace source tree to the configured application.

    Examples:
      npl-deploy deploy              # Deploy current workspace
      npl-deploy deploy --dir ./app  # Deploy from specific directory
    """
    workspace = Path(project_dir).resolve() if project_dir else Path.cwd()

    config_manager = DeploymentConfigManager()
    credentials = CredentialManager()

    config = config_manager.load(workspace)
    if config is None:
        console.print(
            "[red]Error:[/red] No deployment configuration found. "
            "Run [bold]npl-deploy configure[/bold] first."
        )
        raise typer.Exit(1)

    if not credentials.get_password(config.base_url, config.username):
        password = questionary.password(
            f"Enter your password for {config.username} at {config.base_url}:"
        ).ask()
        if not password:
            console.print("[yellow]Deployment not attempted:[/yellow] password is required")
            raise typer.Exit(1)
        credentials.store_password(config.base_url, config.username, password)

    _display_deploy_config(config)

    orchestrator = DeploymentOrchestrator(
        config_manager, credentials, confirm=confirm_rapid_deploy
    )

    try:
        status = asyncio.run(orchestrator.run(workspace))
    except DeploymentCancelled as e:
        console.print(f"[yellow]Deployment not attempted:[/yellow] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Deployment cancelled by user[/yellow]")
        raise typer.Exit(1)

    display_status(status)
    if not status.success:
        raise typer.Exit(1)


async def confirm_rapid_deploy(config: DeploymentConfig) -> RapidDeployChoice:
    """Ask before clearing all application data."""
    choice = await questionary.select(
        f"This will DELETE ALL DATA in application '{config.app_name}' "
        "before deployment. Are you sure?",
        choices=[
            questionary.Choice("Yes, clear data and deploy", RapidDeployChoice.PROCEED),
            questionary.Choice(
                "Yes, and don't warn me again", RapidDeployChoice.PROCEED_AND_REMEMBER
            ),
            questionary.Choice("No", RapidDeployChoice.DECLINE),
        ],
    ).ask_async()
    return choice or RapidDeployChoice.DECLINE


def _display_deploy_config(config: DeploymentConfig):
    console.print(
        Panel(
            f"[bold]Server:[/bold] {config.base_url}\n"
            f"[bold]Application:[/bold] {config.app_name}\n"
            f"[bold]User:[/bold] {config.username}\n"
            f"[bold]Source:[/bold] {config.source_path}\n"
            f"[bold]Rapid deploy:[/bold] {'Enabled' if config.rapid_deploy else 'Disabled'}",
            title="Deployment Configuration",
            expand=False,
        )
    )


def display_status(status: DeploymentStatus):
    if status.success:
        console.print(
            Panel(
                status.message,
                title="✓ Deployed",
                expand=False,
                border_style="green",
            )
        )
        return

    body = f"[bold]{status.message}[/bold]"
    if status.detail and status.result in _SHOW_DETAIL:
        body += f"\n\n[dim]{status.detail}[/dim]"

    console.print(
        Panel(
            body,
            title=f"✗ Deployment failed ({status.result.value})",
            expand=False,
            border_style="red",
        )
    )

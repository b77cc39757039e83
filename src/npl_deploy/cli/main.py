"""Main CLI entry point for npl-deploy."""

import typer
from importlib import metadata
from rich.console import Console
from rich.panel import Panel

from .commands import apps, configure, deploy


def get_version() -> str:
    """Get the package version from metadata."""
    try:
        return metadata.version("npl-deploy")
    except metadata.PackageNotFoundError:
        return "unknown"


console = Console()

# command: npl-deploy
app = typer.Typer(
    name="npl-deploy",
    help="Package and deploy NPL sources to a hosted application",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# command: npl-deploy <command>
app.command("deploy")(deploy.deploy_command)
app.command("configure")(configure.configure_command)
app.command("apps")(apps.apps_command)
app.command("logout")(configure.logout_command)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    """Package and deploy NPL sources to a hosted application."""
    if version:
        console.print(f"npl-deploy v{get_version()}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            Panel(
                "[bold blue]npl-deploy[/bold blue]\n\n"
                "Ships an NPL source tree to its configured application.\n\n"
                "Use [bold]npl-deploy --help[/bold] to see available commands.",
                title="Welcome",
                expand=False,
            )
        )


if __name__ == "__main__":
    app()

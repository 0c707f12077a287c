"""CLI commands for the project as a whole."""

from __future__ import annotations

from typing import Annotated

import typer
from result import Err, Ok

from fireline.cli.context import fail, open_project

DEFAULT_PROBE_EMAIL = "fireline-probe@example.com"
DEFAULT_PROBE_PASSWORD = "fireline-probe-password"

app = typer.Typer(
    help="Check project credentials.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def _project_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("verify")
def verify(
    ctx: typer.Context,
    probe_email: Annotated[str, typer.Option("--probe-email", help="Throwaway account used for the check")] = (
        DEFAULT_PROBE_EMAIL
    ),
    probe_password: Annotated[str, typer.Option("--probe-password", help="Password of the probe account")] = (
        DEFAULT_PROBE_PASSWORD
    ),
) -> None:
    """Verify the credentials by signing a probe account in and deleting it.

    The probe account is created when it does not exist yet.
    """
    with open_project(ctx) as project:
        match project.verify(probe_email, probe_password):
            case Ok(_):
                typer.secho(f"✓ Project '{project.config.auth_domain}' is reachable", fg=typer.colors.GREEN)
            case Err(error):
                fail(error)

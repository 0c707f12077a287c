from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from fireline.common import create_logger, setup_cli_logging
from fireline.settings import get_settings

from .commands import auth as auth_commands
from .commands import data as data_commands
from .commands import project as project_commands
from .commands import storage as storage_commands
from .context import CliState

logger = create_logger("cli")

app = typer.Typer(help="Fireline command-line interface.")
app.add_typer(project_commands.app, name="project")
app.add_typer(data_commands.app, name="data")
app.add_typer(storage_commands.app, name="storage")
app.add_typer(auth_commands.app, name="auth")


@app.callback(invoke_without_command=True)
def _root_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", envvar="FIRELINE_CONFIG", help="YAML or JSON project credentials file"),
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
) -> None:
    # Respect NO_COLOR environment variable and --no-color flag
    if no_color or os.getenv("NO_COLOR"):
        ctx.color = False

    ctx.obj = CliState(config_path=config)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _setup_logging() -> None:
    settings = get_settings()
    if settings.logging.enabled:
        setup_cli_logging(app_info=settings.app, config=settings.logging)
        logger.debug("CLI logging initialized", config=settings.logging.model_dump())


def main() -> None:
    """Entrypoint for the fireline CLI."""
    _setup_logging()
    app()

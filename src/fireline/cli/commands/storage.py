"""CLI commands for object storage."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from result import Err, Ok

from fireline.cli.context import TokenOption, fail, open_project

app = typer.Typer(
    help="Upload, locate, list and delete stored objects.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def _storage_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("upload")
def upload(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="Local file to upload")],
    remote_path: Annotated[str, typer.Argument(help="Object name in the bucket")],
    token: TokenOption = None,
) -> None:
    """Upload SOURCE as REMOTE_PATH.

    Examples:

        fireline storage upload ./avatar.png users/alice/avatar.png
    """
    with open_project(ctx) as project:
        if token:
            project.session.set_token(token)
        match project.storage.upload(source, remote_path):
            case Ok(meta):
                size = f" ({meta.size} bytes)" if meta.size is not None else ""
                typer.secho(f"✓ Uploaded '{meta.name}'{size}", fg=typer.colors.GREEN)
            case Err(error):
                fail(error)


@app.command("url")
def url(
    ctx: typer.Context,
    remote_path: Annotated[str, typer.Argument(help="Object name in the bucket")],
    token: TokenOption = None,
) -> None:
    """Print a download URL for REMOTE_PATH."""
    with open_project(ctx) as project:
        if token:
            project.session.set_token(token)
        match project.storage.download_url(remote_path):
            case Ok(link):
                typer.echo(link)
            case Err(error):
                fail(error)


@app.command("list")
def list_objects(
    ctx: typer.Context,
    prefix: Annotated[str, typer.Argument(help="Folder to list")],
    token: TokenOption = None,
) -> None:
    """List the objects stored under PREFIX."""
    with open_project(ctx) as project:
        if token:
            project.session.set_token(token)
        match project.storage.list(prefix):
            case Ok(names):
                if not names:
                    typer.echo("No objects found.")
                    return
                for name in names:
                    typer.echo(name)
            case Err(error):
                fail(error)


@app.command("delete")
def delete(
    ctx: typer.Context,
    remote_path: Annotated[str, typer.Argument(help="Object name in the bucket")],
    token: TokenOption = None,
) -> None:
    """Delete REMOTE_PATH from the bucket."""
    with open_project(ctx) as project:
        if token:
            project.session.set_token(token)
        match project.storage.delete(remote_path):
            case Ok(_):
                typer.secho(f"✓ Deleted '{remote_path}'", fg=typer.colors.GREEN)
            case Err(error):
                fail(error)

"""CLI commands for the realtime database."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from result import Err, Ok

from fireline.cli.context import TokenOption, fail, open_project

IntOption = Annotated[bool, typer.Option("--int", help="Send values as integers instead of strings.")]

app = typer.Typer(
    help="Read and write values in the realtime database.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def _data_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("get")
def get(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    token: TokenOption = None,
) -> None:
    """Print the JSON stored at PATH.

    Examples:

        fireline data get users/alice
    """
    with open_project(ctx) as project:
        match project.database.read(path, token):
            case Ok(body):
                typer.echo(body)
            case Err(error):
                fail(error)


@app.command("set")
def set_value(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    key: Annotated[str, typer.Argument(help="Field name")],
    value: Annotated[str, typer.Argument(help="Field value")],
    as_int: IntOption = False,
    token: TokenOption = None,
) -> None:
    """Replace the value at PATH with {KEY: VALUE}."""
    with open_project(ctx) as project:
        match project.database.write(path, key, _scalar(value, as_int), token):
            case Ok(body):
                typer.echo(body)
            case Err(error):
                fail(error)


@app.command("update")
def update(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    key: Annotated[str, typer.Argument(help="Field name")],
    value: Annotated[str, typer.Argument(help="Field value")],
    as_int: IntOption = False,
    token: TokenOption = None,
) -> None:
    """Set KEY to VALUE in the object at PATH, keeping its other fields."""
    with open_project(ctx) as project:
        match project.database.update(path, key, _scalar(value, as_int), token):
            case Ok(body):
                typer.echo(body)
            case Err(error):
                fail(error)


@app.command("append")
def append(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    values: Annotated[list[str], typer.Argument(help="One value, or several to send as a list")],
    as_int: IntOption = False,
    token: TokenOption = None,
) -> None:
    """Append VALUES to whatever is stored at PATH.

    Several values replace a stored list instead of extending it.

    Examples:

        fireline data append logs/today "started"
    """
    scalars = [_scalar(value, as_int) for value in values]
    incoming = scalars[0] if len(scalars) == 1 else scalars

    with open_project(ctx) as project:
        match project.database.append(path, incoming, token):
            case Ok(body):
                typer.echo(body)
            case Err(error):
                fail(error)


@app.command("push")
def push(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    value: Annotated[str, typer.Argument(help="Value to add; parsed as JSON when possible")],
    token: TokenOption = None,
) -> None:
    """Add VALUE under a generated key below PATH and print the key."""
    try:
        payload = json.loads(value)
    except json.JSONDecodeError:
        payload = value

    with open_project(ctx) as project:
        match project.database.push(path, payload, token):
            case Ok(name):
                typer.echo(name)
            case Err(error):
                fail(error)


@app.command("delete")
def delete(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path")],
    token: TokenOption = None,
) -> None:
    """Remove everything stored at PATH."""
    with open_project(ctx) as project:
        match project.database.delete(path, token):
            case Ok(_):
                typer.secho(f"✓ Deleted '{path}'", fg=typer.colors.GREEN)
            case Err(error):
                fail(error)


@app.command("objects")
def objects(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Slash separated data path of a collection")],
    token: TokenOption = None,
) -> None:
    """Print the members of the collection at PATH that are objects."""
    with open_project(ctx) as project:
        match project.database.list_as_objects(path, token):
            case Ok(members):
                typer.echo(json.dumps(members, indent=2, sort_keys=True))
            case Err(error):
                fail(error)


def _scalar(value: str, as_int: bool) -> str | int:
    if not as_int:
        return value
    try:
        return int(value)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not an integer") from None

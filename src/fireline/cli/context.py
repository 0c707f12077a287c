"""State shared by the CLI command groups."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from result import Err, Ok

from fireline.config import ConfigError, ConfigNotFoundError, ConfigValidationError, ConfigYamlError
from fireline.core import ArgumentError, ProtocolError, RemoteErrorCode, ServiceError, ShapeConflictError, TransportError
from fireline.project import Project

TokenOption = Annotated[
    str | None,
    typer.Option("--token", "-t", envvar="FIRELINE_TOKEN", help="ID token sent with the request."),
]


@dataclass
class CliState:
    config_path: Path | None = None


@contextmanager
def open_project(ctx: typer.Context) -> Iterator[Project]:
    """Build the project selected by ``--config`` (or the environment) and close it afterwards."""
    state = ctx.find_object(CliState) or CliState()
    loaded = Project.from_file(state.config_path) if state.config_path else Project.from_settings()

    match loaded:
        case Ok(project):
            with project:
                yield project
        case Err(error):
            fail_config(error)


def fail_config(error: ConfigError) -> NoReturn:
    message = f"error: {error.message}"
    match error:
        case ConfigNotFoundError(expected_path=expected_path):
            message = f"{message} (expected at {expected_path})"
        case ConfigYamlError(path=path, line=line) if line is not None:
            message = f"{message} ({path}:{line})"
        case ConfigValidationError(path=None):
            typer.secho(message, err=True, fg=typer.colors.RED)
            typer.secho(
                "hint: pass --config PATH or set FIRELINE_PROJECT__API_KEY and friends",
                err=True,
                fg=typer.colors.CYAN,
            )
            raise typer.Exit(code=1)
        case _:
            path = getattr(error, "path", None)
            if path is not None:
                message = f"{message} ({path})"

    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def fail(error: ServiceError) -> NoReturn:
    """Report a failed operation and exit with status 1."""
    match error:
        case ArgumentError(argument=argument, message=message):
            typer.secho(f"error: invalid {argument}: {message}", err=True, fg=typer.colors.RED)
        case ProtocolError(code=RemoteErrorCode.NO_DATA):
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)
            typer.secho("hint: nothing is stored at that path yet", err=True, fg=typer.colors.CYAN)
        case ProtocolError(code=RemoteErrorCode.PERMISSION_DENIED | RemoteErrorCode.INVALID_ID_TOKEN):
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)
            typer.secho("hint: sign in with 'fireline auth sign-in' and pass --token", err=True, fg=typer.colors.CYAN)
        case ProtocolError(status=status, message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
            typer.secho(f"  status: {status}", err=True)
        case TransportError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
            typer.secho("hint: check the network connection and the configured URLs", err=True, fg=typer.colors.CYAN)
        case ShapeConflictError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case _:
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


__all__ = ["CliState", "TokenOption", "fail", "fail_config", "open_project"]

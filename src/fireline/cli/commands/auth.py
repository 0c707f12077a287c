"""CLI commands for accounts and sign-in."""

from __future__ import annotations

from typing import Annotated

import typer
from result import Err, Ok

from fireline.cli.context import fail, open_project

EmailArgument = Annotated[str, typer.Argument(help="Account email address")]
PasswordOption = Annotated[
    str,
    typer.Option("--password", "-p", prompt=True, hide_input=True, help="Account password"),
]

app = typer.Typer(
    help="Manage accounts and obtain ID tokens.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def _auth_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("sign-in")
def sign_in(ctx: typer.Context, email: EmailArgument, password: PasswordOption) -> None:
    """Sign in and print the ID token."""
    with open_project(ctx) as project:
        match project.auth.sign_in(email, password):
            case Ok(session):
                typer.echo(session.id_token)
            case Err(error):
                fail(error)


@app.command("sign-up")
def sign_up(ctx: typer.Context, email: EmailArgument, password: PasswordOption) -> None:
    """Create an account and print its ID token."""
    with open_project(ctx) as project:
        match project.auth.sign_up(email, password):
            case Ok(session):
                typer.echo(session.id_token)
            case Err(error):
                fail(error)


@app.command("reset-password")
def reset_password(ctx: typer.Context, email: EmailArgument) -> None:
    """Send a password reset email."""
    with open_project(ctx) as project:
        match project.auth.send_password_reset(email):
            case Ok(address):
                typer.secho(f"✓ Password reset email sent to {address}", fg=typer.colors.GREEN)
            case Err(error):
                fail(error)


@app.command("lookup")
def lookup(
    ctx: typer.Context,
    token: Annotated[str, typer.Option("--token", "-t", envvar="FIRELINE_TOKEN", help="ID token of the account")],
) -> None:
    """Show the account owning an ID token."""
    with open_project(ctx) as project:
        match project.auth.lookup_user(token):
            case Ok(user):
                typer.secho(f"• {user.email or '(no email)'}", fg=typer.colors.CYAN, bold=True)
                typer.echo(f"  id: {user.local_id}")
                typer.echo(f"  verified: {'yes' if user.email_verified else 'no'}")
                if user.disabled:
                    typer.echo("  disabled: yes")
            case Err(error):
                fail(error)

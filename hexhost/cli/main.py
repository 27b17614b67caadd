"""hexhost CLI - Main entrypoint.

A thin dispatcher over :class:`~hexhost.kernel.FileSystem`: every command
builds a resource for this machine and prints what it reports.
``--via-shell`` sends everything through ``/bin/sh`` and the remote
backend instead of direct OS calls, which is handy for checking that both
backends agree.
"""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from hexhost import __version__
from hexhost.drivers.shell import LocalShell
from hexhost.kernel import (
    Directory,
    FileSystem,
    HexHostError,
    StatAttributes,
    configure_logging,
    load_config,
)
from hexhost.kernel.logging import configure_from

app = typer.Typer(
    name="hexhost",
    help="hexhost - inspect files, directories and devices as typed resources.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    via_shell: bool = typer.Option(
        False, "--via-shell", help="Run every operation as a shell command (remote backend)"
    ),
    platform: str | None = typer.Option(
        None, "--platform", help="Platform tag for stat parsing (linux, darwin, ...)"
    ),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """hexhost CLI.

    Global flags are parsed here and stored on `ctx.obj` for the commands.
    """
    if version:
        console.print(f"[bold blue]hexhost[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()

    config = load_config()
    if verbose:
        configure_logging(level="DEBUG", format="rich", use_rich=True, force_reconfigure=True)
    else:
        configure_from(config.logging)

    ctx.obj = {"via_shell": via_shell, "platform": platform, "config": config}


def _file_system(ctx: typer.Context) -> FileSystem:
    options = ctx.obj or {}
    config = options.get("config") or load_config()
    if options.get("via_shell"):
        shell = LocalShell(
            poll_interval=config.shell.poll_interval,
            default_timeout=config.shell.command_timeout,
        )
        return FileSystem(shell=shell, platform=options.get("platform"), config=config, remote=True)
    return FileSystem(platform=options.get("platform"), config=config)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


@app.command()
def classify(ctx: typer.Context, path: str = typer.Argument(..., help="Path to classify")) -> None:
    """Print the resource kind of PATH."""
    console.print(_file_system(ctx).classify(path).value)


@app.command()
def stat(ctx: typer.Context, path: str = typer.Argument(..., help="Path to stat")) -> None:
    """Show the stat attributes of PATH."""
    resource = _file_system(ctx)[path]
    result = resource.stat()
    if result.failed:
        _fail(result.text)

    attributes: StatAttributes = result.value
    table = Table(title=f"{resource.path} ({resource.kind.value})")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", style="green")
    for name, value in attributes.model_dump().items():
        table.add_row(name, "-" if value is None else str(value))
    table.add_row("permissions", str(attributes.permissions))
    console.print(table)


@app.command()
def mode(ctx: typer.Context, path: str = typer.Argument(..., help="Path to inspect")) -> None:
    """Print the permission bits of PATH as octal digits."""
    value = _file_system(ctx)[path].mode
    if value is None:
        _fail(f"cannot read the mode of {path}")
    console.print(value)


@app.command("ls")
def list_directory(
    ctx: typer.Context, path: str = typer.Argument(".", help="Directory to list")
) -> None:
    """List the entries of a directory with their kinds."""
    fs = _file_system(ctx)
    directory = fs[path]
    if not isinstance(directory, Directory):
        _fail(f"{path} is not a directory")

    result = directory.entries()
    if result.failed:
        _fail(result.text)

    table = Table(title=directory.path)
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Mode", justify="right")
    for name in result.value:
        entry = fs[f"{directory.path.rstrip('/')}/{name}"]
        table.add_row(name, entry.kind.value, str(entry.mode or "-"))
    console.print(table)


def main() -> None:
    """Main CLI entrypoint."""
    try:
        app()
    except HexHostError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()

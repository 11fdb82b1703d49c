"""CLI commands for unixsvc."""

import subprocess
import sys
from pathlib import Path

import click
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from unixsvc import __logo__, __version__
from unixsvc.daemon.outcome import LifecycleOutcome
from unixsvc.errors import UnixServiceError

app = typer.Typer(
    name="unixsvc",
    help=f"{__logo__} unixsvc - run a script as a Unix background service",
    no_args_is_help=True,
)

console = Console()

# Exit codes understood by existing automation.
EXIT_OK = 0
EXIT_NEGATIVE = 1
EXIT_ERROR = 2


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} unixsvc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
    name: str | None = typer.Option(None, "--name", "-n", help="Service name"),
    script: str | None = typer.Option(None, "--script", "-f", help="Script to supervise"),
    description: str | None = typer.Option(None, "--description", help="Service description"),
    user: str | None = typer.Option(None, "--user", "-u", help="User to run the script as"),
    group: str | None = typer.Option(None, "--group", "-g", help="Group to run the script as"),
    cwd: str | None = typer.Option(None, "--cwd", "-d", help="Working directory of the script"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """unixsvc - run a script as a Unix background service."""
    if verbose:
        logger.enable("unixsvc")
    else:
        logger.disable("unixsvc")

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = {
        "name": name,
        "script": script,
        "description": description,
        "user": user,
        "group": group,
        "cwd": cwd,
    }


# ============================================================================
# Lifecycle
# ============================================================================


def _get_service_manager(ctx: typer.Context):
    """Create a ServiceManager from the config file plus command-line overrides."""
    from unixsvc.config.loader import (
        build_descriptor,
        build_supervisor_command,
        configured_flavor,
        load_config,
    )
    from unixsvc.daemon import ServiceManager

    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_path"))
    for key, value in obj.get("overrides", {}).items():
        if value is not None:
            setattr(config.service, key, value)

    return ServiceManager(
        build_descriptor(config),
        build_supervisor_command(config),
        flavor=configured_flavor(config),
        root=Path(config.host.root),
    )


def _manager_or_exit(ctx: typer.Context):
    try:
        return _get_service_manager(ctx)
    except (UnixServiceError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)


def _run_lifecycle_action(ctx: typer.Context, action: str) -> None:
    """Run one lifecycle operation and exit with the code its outcome maps to."""
    dm = _manager_or_exit(ctx)
    try:
        outcome: LifecycleOutcome = getattr(dm, action)()
    except (UnixServiceError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    if outcome.ok:
        console.print(f"[green]✓[/green] {dm.descriptor.name}: {outcome}")
    elif outcome.exit_code == EXIT_NEGATIVE:
        console.print(f"[yellow]![/yellow] {dm.descriptor.name}: {outcome}")
    else:
        console.print(f"[red]Error:[/red] {dm.descriptor.name}: {outcome}")
    raise typer.Exit(outcome.exit_code)


@app.command("install")
def install(ctx: typer.Context):
    """Install the script as an init-system service."""
    _run_lifecycle_action(ctx, "install")


@app.command("uninstall")
def uninstall(ctx: typer.Context):
    """Stop the service and remove its control script, PID file and logs."""
    _run_lifecycle_action(ctx, "uninstall")


@app.command("start")
def start(ctx: typer.Context):
    """Start the service through its control script."""
    _run_lifecycle_action(ctx, "start")


@app.command("stop")
def stop(ctx: typer.Context):
    """Stop the service."""
    _run_lifecycle_action(ctx, "stop")


@app.command("restart")
def restart(ctx: typer.Context):
    """Stop, then start the service."""
    _run_lifecycle_action(ctx, "restart")


@app.command("status")
def status(ctx: typer.Context):
    """Show service status. Exits 1 when the service is not installed."""
    dm = _manager_or_exit(ctx)
    try:
        info = dm.get_info()
    except (UnixServiceError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    table = Table(title="Service Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Service", info.name)
    table.add_row("Flavor", info.flavor.value)
    table.add_row("Installed", "[green]yes[/green]" if info.installed else "[red]no[/red]")
    table.add_row("Running", "[green]yes[/green]" if info.running else "[dim]no[/dim]")
    table.add_row("PID", str(info.pid) if info.pid else "-")
    table.add_row("Control script", str(info.control_script))
    table.add_row("PID file", str(info.pid_file))
    table.add_row("Stdout log", str(info.stdout_log))
    table.add_row("Stderr log", str(info.stderr_log))

    console.print(table)
    raise typer.Exit(EXIT_OK if info.installed else EXIT_NEGATIVE)


@app.command("logs")
def logs(
    ctx: typer.Context,
    follow: bool = typer.Option(False, "--follow", "-F", help="Follow log output"),
    lines: int = typer.Option(50, "--lines", "-l", help="Number of lines to show"),
    stderr: bool = typer.Option(False, "--stderr", "-e", help="Show stderr log instead"),
):
    """Tail the service log files."""
    dm = _manager_or_exit(ctx)
    try:
        log_out, log_err = dm.log_paths()
    except (UnixServiceError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)
    log_file = log_err if stderr else log_out

    if not log_file.exists():
        console.print(f"[yellow]Log file not found:[/yellow] {log_file}")
        console.print("Has the service been started?")
        raise typer.Exit(EXIT_NEGATIVE)

    cmd = ["tail", f"-n{lines}"]
    if follow:
        cmd.append("-f")
    cmd.append(str(log_file))

    try:
        subprocess.run(cmd)
    except KeyboardInterrupt:
        pass


def run() -> None:
    """Console-script entry point; a mistyped command line exits with status 1."""
    try:
        code = app(standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(EXIT_NEGATIVE)
    except click.Abort:
        console.print("Aborted.")
        sys.exit(EXIT_NEGATIVE)
    sys.exit(code or EXIT_OK)

"""Command-line entry point invoked by generated control scripts."""

from pathlib import Path

import psutil
import typer

from unixsvc.daemon.outcome import ALREADY_RUNNING_MARKER, NOT_RUNNING_MARKER
from unixsvc.supervisor.daemon import DISCARD, UNCHANGED, Daemon, PidFile

app = typer.Typer(
    name="unixsvc-daemon",
    help="Start, stop or query a script running as a background process.",
    add_completion=False,
)


def _report(name: str, ok: bool, message: str) -> None:
    typer.echo(f"{name}: {'OK' if ok else 'ERROR'}: {message}")
    raise typer.Exit(0 if ok else 1)


@app.command()
def main(
    action: str = typer.Argument(..., help="start, stop or status"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed on to the script."),
    name: str = typer.Option(..., "--name", "-n", help="The name of the process."),
    file: Path = typer.Option(
        ..., "--file", "-f", help="Absolute path of the script to be run as a process."
    ),
    pidfile: Path = typer.Option(..., "--pidfile", "-p", help="Absolute path of the PID file."),
    cwd: Path = typer.Option(
        Path("/"), "--cwd", "-d", help="The current working directory for the process."
    ),
    stdout: str = typer.Option(
        DISCARD, "--stdout", "-o", help="Absolute path of the stdout log file."
    ),
    stderr: str = typer.Option(
        DISCARD, "--stderr", "-e", help="Absolute path of the stderr log file."
    ),
    user: str = typer.Option(UNCHANGED, "--user", "-u", help="User to run process under."),
    group: str = typer.Option(UNCHANGED, "--group", "-g", help="Group to run process under."),
    timeout: int = typer.Option(
        2000, "--timeout", "-t", help="Stop timeout (ms) for daemon killing retry."
    ),
):
    """Daemonize, stop or query one script."""
    daemon = Daemon(
        name=name,
        script=file.absolute(),
        pidfile=PidFile(pidfile.absolute()),
        cwd=cwd.absolute(),
        stdout=stdout if stdout == DISCARD else str(Path(stdout).absolute()),
        stderr=stderr if stderr == DISCARD else str(Path(stderr).absolute()),
        user=user,
        group=group,
        stop_timeout=timeout / 1000,
        args=list(args or []),
    )

    if action == "start":
        try:
            started = daemon.start()
        except (OSError, KeyError, ValueError) as e:
            # unknown user/group names surface as KeyError from the pwd/grp lookup
            _report(name, False, str(e))
        _report(name, started, "started" if started else ALREADY_RUNNING_MARKER)
    elif action == "stop":
        try:
            stopped = daemon.stop()
        except (psutil.Error, OSError) as e:
            # AccessDenied for someone else's process, TimeoutExpired after SIGKILL
            _report(name, False, str(e) or type(e).__name__)
        _report(name, stopped, "stopped" if stopped else NOT_RUNNING_MARKER)
    elif action == "status":
        running = daemon.status() is not None
        typer.echo(f"{name}: OK: status: {'running' if running else 'not running'}")
        raise typer.Exit(0 if running else 1)
    else:
        _report(name, False, "invalid command")


if __name__ == "__main__":
    app()

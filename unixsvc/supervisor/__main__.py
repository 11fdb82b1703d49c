"""Entry point for running the supervisor via `python -m unixsvc.supervisor`."""

from unixsvc.supervisor.cli import app

if __name__ == "__main__":
    app()

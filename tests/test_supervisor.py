"""Tests for the supervisor entry point: PID files, spawning and stopping."""

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import psutil
import pytest
from typer.testing import CliRunner

from unixsvc.supervisor.cli import app
from unixsvc.supervisor.daemon import Daemon, PidFile

cli = CliRunner()


@pytest.fixture
def pidfile(tmp_path: Path) -> PidFile:
    return PidFile(tmp_path / "svc.pid")


@pytest.fixture
def sleeper(tmp_path: Path) -> Path:
    script = tmp_path / "sleeper.py"
    script.write_text(
        textwrap.dedent("""\
            import sys
            import time

            print("up", flush=True)
            time.sleep(60)
        """)
    )
    return script


class TestPidFile:
    def test_missing_file(self, pidfile: PidFile):
        assert pidfile.read() is None
        assert pidfile.running_pid() is None

    def test_live_pid(self, pidfile: PidFile):
        pidfile.write(os.getpid())
        assert pidfile.read() == os.getpid()
        assert pidfile.running_pid() == os.getpid()

    def test_garbage_is_ignored(self, pidfile: PidFile):
        pidfile.path.write_text("not-a-pid\n")
        assert pidfile.read() is None

    def test_stale_file_removed(self, pidfile: PidFile, monkeypatch):
        pidfile.write(424242)
        monkeypatch.setattr("psutil.pid_exists", lambda pid: False)

        assert pidfile.running_pid() is None
        assert not pidfile.path.exists()


class TestDaemon:
    def test_start_status_stop(self, tmp_path, pidfile, sleeper):
        out = tmp_path / "out.log"
        daemon = Daemon(
            name="svc",
            script=sleeper,
            pidfile=pidfile,
            cwd=tmp_path,
            stdout=str(out),
            stop_timeout=2.0,
        )

        assert daemon.start() is True
        try:
            pid = daemon.status()
            assert pid is not None and pid != os.getpid()
            assert daemon.start() is False
        finally:
            assert daemon.stop() is True

        assert daemon.status() is None
        assert not pidfile.path.exists()
        assert daemon.stop() is False

    def test_python_scripts_run_with_interpreter(self, sleeper, pidfile):
        daemon = Daemon(name="svc", script=sleeper, pidfile=pidfile)
        assert daemon._command() == [sys.executable, str(sleeper)]

    def test_executables_run_directly(self, tmp_path, pidfile):
        tool = tmp_path / "run"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)
        daemon = Daemon(name="svc", script=tool, pidfile=pidfile, args=["--flag"])
        assert daemon._command() == [str(tool), "--flag"]

    def test_non_python_scripts_exec_directly(self, tmp_path, pidfile):
        script = tmp_path / "run.js"
        script.write_text("console.log('up');\n")
        daemon = Daemon(name="svc", script=script, pidfile=pidfile)
        assert daemon._command() == [str(script)]

    def test_unwritable_pidfile_leaves_no_child(self, tmp_path, sleeper, monkeypatch):
        spawned = []
        real_popen = subprocess.Popen

        def recording_popen(*args, **kwargs):
            proc = real_popen(*args, **kwargs)
            spawned.append(proc)
            return proc

        monkeypatch.setattr(subprocess, "Popen", recording_popen)
        daemon = Daemon(
            name="svc",
            script=sleeper,
            pidfile=PidFile(tmp_path / "missing" / "svc.pid"),
            cwd=tmp_path,
        )

        with pytest.raises(OSError):
            daemon.start()

        assert len(spawned) == 1
        assert spawned[0].poll() is not None


class TestCli:
    def _args(self, tmp_path: Path, action: str) -> list[str]:
        return [
            "-n", "svc",
            "-f", str(tmp_path / "sleeper.py"),
            "-p", str(tmp_path / "svc.pid"),
            action,
        ]  # fmt: skip

    def test_status_not_running(self, tmp_path):
        result = cli.invoke(app, self._args(tmp_path, "status"))
        assert result.exit_code == 1
        assert result.output.strip() == "svc: OK: status: not running"

    def test_status_running(self, tmp_path):
        (tmp_path / "svc.pid").write_text(f"{os.getpid()}\n")
        result = cli.invoke(app, self._args(tmp_path, "status"))
        assert result.exit_code == 0
        assert result.output.strip() == "svc: OK: status: running"

    def test_stop_not_running(self, tmp_path):
        result = cli.invoke(app, self._args(tmp_path, "stop"))
        assert result.exit_code == 1
        assert result.output.strip() == "svc: ERROR: cannot stop -- not running"

    def test_start_already_running(self, tmp_path):
        (tmp_path / "svc.pid").write_text(f"{os.getpid()}\n")
        result = cli.invoke(app, self._args(tmp_path, "start"))
        assert result.exit_code == 1
        assert result.output.strip() == "svc: ERROR: cannot start -- already running"

    def test_invalid_action(self, tmp_path):
        result = cli.invoke(app, self._args(tmp_path, "reload"))
        assert result.exit_code == 1
        assert "ERROR: invalid command" in result.output

    def test_stop_permission_denied(self, tmp_path, monkeypatch):
        (tmp_path / "svc.pid").write_text(f"{os.getpid()}\n")

        def deny(self, proc):
            raise psutil.AccessDenied(pid=proc.pid)

        monkeypatch.setattr(Daemon, "_terminate", deny)
        result = cli.invoke(app, self._args(tmp_path, "stop"))

        assert result.exit_code == 1
        assert result.output.startswith("svc: ERROR:")
        assert (tmp_path / "svc.pid").exists()

    def test_trailing_args_passed_to_script(self, tmp_path, monkeypatch):
        seen = []

        def fake_start(self):
            seen.append(self.args)
            return True

        monkeypatch.setattr(Daemon, "start", fake_start)
        result = cli.invoke(app, [*self._args(tmp_path, "start"), "--", "--port", "8080"])

        assert result.exit_code == 0
        assert result.output.strip() == "svc: OK: started"
        assert seen == [["--port", "8080"]]

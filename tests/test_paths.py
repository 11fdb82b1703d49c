"""Tests for flavor path resolution."""

from pathlib import Path

import pytest

from unixsvc.daemon.paths import InitFlavor, resolve, tool_search_path
from unixsvc.errors import HostEnvironmentError


class TestResolve:
    def test_sysv_paths(self, host_root: Path):
        paths = resolve(InitFlavor.SYSV, "sample", root=host_root)

        assert paths.control_script == host_root / "etc/init.d/sample"
        assert paths.pid_file == host_root / "var/run/sample.pid"
        assert paths.stdout_log == host_root / "var/log/sample-out.log"
        assert paths.stderr_log == host_root / "var/log/sample-err.log"

    def test_bsdrc_paths(self, host_root: Path):
        paths = resolve(InitFlavor.BSDRC, "sample", root=host_root)

        assert paths.control_script == host_root / "etc/rc.d/sample"
        assert paths.pid_file == host_root / "var/run/sample.pid"

    def test_is_deterministic(self, host_root: Path):
        assert resolve(InitFlavor.SYSV, "a", root=host_root) == resolve(
            InitFlavor.SYSV, "a", root=host_root
        )

    def test_files_lists_all_four(self, host_root: Path):
        paths = resolve(InitFlavor.SYSV, "sample", root=host_root)
        assert paths.files() == (
            paths.control_script,
            paths.pid_file,
            paths.stdout_log,
            paths.stderr_log,
        )

    @pytest.mark.parametrize("missing", ["etc/init.d", "var/run", "var/log"])
    def test_missing_sysv_directory_raises(self, host_root: Path, missing: str):
        (host_root / missing).rmdir()

        with pytest.raises(HostEnvironmentError) as exc:
            resolve(InitFlavor.SYSV, "sample", root=host_root)

        assert exc.value.directory == host_root / missing
        assert "not existing" in str(exc.value)

    def test_missing_rc_dir_raises_only_for_bsdrc(self, host_root: Path):
        (host_root / "etc/rc.d").rmdir()

        resolve(InitFlavor.SYSV, "sample", root=host_root)
        with pytest.raises(HostEnvironmentError):
            resolve(InitFlavor.BSDRC, "sample", root=host_root)

    def test_error_is_an_environment_error(self, tmp_path: Path):
        with pytest.raises(EnvironmentError):
            resolve(InitFlavor.SYSV, "sample", root=tmp_path / "nowhere")


def test_tool_search_path(host_root: Path):
    assert tool_search_path(InitFlavor.SYSV, host_root) == [
        host_root / "sbin",
        host_root / "usr/sbin",
    ]
    assert tool_search_path(InitFlavor.BSDRC, host_root) == []

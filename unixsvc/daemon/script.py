"""Control-script generation for each init flavor.

The output depends only on its inputs (no timestamps), so an installed script
can be compared byte for byte with a freshly rendered one.
"""

import shlex
import textwrap
from dataclasses import dataclass

from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.paths import InitFlavor, ResolvedPaths

SHELL_FUNCTION = "unixsvc_daemon"


@dataclass(frozen=True)
class SupervisorCommand:
    """How the control script invokes the supervisor entry point."""

    argv: tuple[str, ...]
    stop_timeout: int | None = None  # milliseconds; None keeps the supervisor default

    def __post_init__(self):
        object.__setattr__(self, "argv", tuple(str(a) for a in self.argv))
        if not self.argv:
            raise ValueError("supervisor command must not be empty")


def _dq(value) -> str:
    """Double-quote a value for sh, escaping the characters special inside quotes."""
    escaped = str(value)
    for ch in ("\\", '"', "$", "`"):
        escaped = escaped.replace(ch, "\\" + ch)
    return f'"{escaped}"'


def _wrapper_function(
    descriptor: ServiceDescriptor, paths: ResolvedPaths, supervisor: SupervisorCommand
) -> str:
    flags = [
        ("-n", descriptor.name),
        ("-f", descriptor.script),
        ("-u", descriptor.user),
        ("-g", descriptor.group),
        ("-p", paths.pid_file),
        ("-d", descriptor.cwd),
        ("-o", paths.stdout_log),
        ("-e", paths.stderr_log),
    ]
    if supervisor.stop_timeout is not None:
        flags.append(("-t", supervisor.stop_timeout))

    lines = [f"{SHELL_FUNCTION} () {{", f"    {shlex.join(supervisor.argv)} \\"]
    lines += [f"    {flag} {_dq(value)} \\" for flag, value in flags]
    lines += ["    $1", "}"]
    return "\n".join(lines) + "\n"


def _render_sysv(descriptor: ServiceDescriptor, paths: ResolvedPaths, wrapper: str) -> str:
    d = descriptor.description
    header = textwrap.dedent(f"""\
        #!/bin/sh
        ### BEGIN INIT INFO
        # Provides:          {descriptor.name}
        # Required-Start:    $remote_fs
        # Required-Stop:     $remote_fs
        # Default-Start:     2 3 4 5
        # Default-Stop:      0 1 6
        # Short-Description: {d}
        # Description:       {d}
        ### END INIT INFO
        # chkconfig: 2345 99 00
        # description: {d}

    """)
    fn = SHELL_FUNCTION
    dispatch = textwrap.dedent(f"""\
        case "$1" in
            start        ) {fn} start  ;;
            stop         ) {fn} stop   ;;
            restart      ) {fn} stop; {fn} start ;;
            status       ) {fn} status ;;
            reload       ) ;;
            force-reload ) ;;
            *            ) echo "Usage: {paths.control_script} {{start|stop|restart|status}}" >&2; exit 1 ;;
        esac
    """)
    return header + wrapper + dispatch


def _render_bsdrc(descriptor: ServiceDescriptor, paths: ResolvedPaths, wrapper: str) -> str:
    name = descriptor.name
    fn = SHELL_FUNCTION
    header = textwrap.dedent(f"""\
        #!/bin/sh
        # PROVIDE: {name}
        # REQUIRE: FILESYSTEMS NETWORKING SERVERS
        # KEYWORD: nojail shutdown

    """)
    rc = textwrap.dedent(f"""\
        . /etc/rc.subr
        name="{name}"
        rcvar="{name}_enable"
        start_cmd="{fn} start"
        stop_cmd="{fn} stop"
        status_cmd="{fn} status"
        restart_cmd="{fn} stop; {fn} start"
        extra_commands="status"
        load_rc_config $name
        run_rc_command "$1"
    """)
    return header + wrapper + rc


_RENDERERS = {
    InitFlavor.SYSV: _render_sysv,
    InitFlavor.BSDRC: _render_bsdrc,
}


def render(
    flavor: InitFlavor,
    descriptor: ServiceDescriptor,
    paths: ResolvedPaths,
    supervisor: SupervisorCommand,
) -> str:
    """Return the full text of the control script for ``flavor``."""
    wrapper = _wrapper_function(descriptor, paths, supervisor)
    return _RENDERERS[flavor](descriptor, paths, wrapper)

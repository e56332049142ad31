"""Dr.Web scanner, driven through drweb-ctl."""

from __future__ import annotations

import re

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

CMD = "/opt/drweb.com/bin/drweb-ctl"
CONFIGD = "/opt/drweb.com/bin/drweb-configd"
DAEMON_TIMEOUT = 30.0

_DETECTION_RE = re.compile(r"infected with (.*)")
_ENGINE_LABEL = "Core engine version:"


def parse_version(out: str) -> str:
    """Extract the core engine version from ``drweb-ctl baseinfo`` output."""
    for line in out.split("\n"):
        if _ENGINE_LABEL in line:
            return line.removeprefix(_ENGINE_LABEL).strip()
    return ""


def version() -> str:
    """Return the Dr.Web core engine version."""
    return parse_version(exec_cmd(CMD, "baseinfo"))


def parse_detection(out: str) -> Result:
    """Turn ``drweb-ctl scan`` output into a Result."""
    match = _DETECTION_RE.search(out)
    if match is None:
        return Result(out=out)
    return Result(infected=True, output=match.group(1), out=out)


class Scanner:
    """Scans files with Dr.Web."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        return parse_detection(exec_cmd(CMD, "scan", file_path))


def start_daemon() -> None:
    """Start the Dr.Web configuration daemon."""
    try:
        exec_cmd("sudo", CONFIGD, "-d", timeout=DAEMON_TIMEOUT)
    except CommandError as exc:
        raise RuntimeError(
            f"failed to start daemon, err: {exc}, out:{exc.output}"
        ) from exc
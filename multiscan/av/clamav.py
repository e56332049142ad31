"""ClamAV scanner, driven through clamdscan."""

from __future__ import annotations

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

CLAMDSCAN = "/usr/bin/clamdscan"
CLAMD = "clamd"
DAEMON_TIMEOUT = 60.0


class Scanner:
    """Scans files with ClamAV."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        try:
            out = exec_cmd(CLAMDSCAN, "--no-summary", file_path)
        except CommandError as exc:
            if exc.timed_out or exc.returncode != 1:
                raise
            out = exc.output
        return parse_detection(out)


def parse_detection(out: str) -> Result:
    """Turn clamdscan output into a Result."""
    if out.endswith("OK\n") or not out.endswith("FOUND\n"):
        return Result(out=out)
    detection = out.split(": ")[-1].removesuffix(" FOUND\n")
    return Result(infected=True, output=detection, out=out)


def parse_version(out: str) -> str:
    """Extract the engine version from ``clamdscan --version`` output."""
    head = out.split("/")[0].split(" ")
    if len(head) < 2:
        raise ValueError(f"no version found in {out!r}")
    return head[1]


def version() -> str:
    """Return the ClamAV version."""
    return parse_version(exec_cmd(CLAMDSCAN, "--version"))


def start_daemon() -> None:
    """Start the clamd daemon."""
    try:
        exec_cmd(CLAMD, timeout=DAEMON_TIMEOUT)
    except CommandError as exc:
        raise RuntimeError(
            f"failed to start daemon, err: {exc}, out:{exc.output}"
        ) from exc
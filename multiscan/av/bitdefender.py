"""Bitdefender command-line scanner."""

from __future__ import annotations

import re

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

BDSCAN = "/opt/BitDefender-scanner/bin/bdscan"

_VERSION_RE = re.compile(r"v\d\.\d{6}")
_INFECTED_MARK = "infected: "


class Scanner:
    """Scans files with Bitdefender."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        try:
            out = exec_cmd(BDSCAN, "--action=ignore", file_path)
        except CommandError as exc:
            if exc.timed_out or exc.returncode != 1:
                raise
            out = exc.output
        return parse_detection(out)


def parse_program_version(out: str) -> str:
    """Extract the version from the banner's first line."""
    first_line = out.split("\n")[0]
    match = _VERSION_RE.search(first_line)
    if match is None:
        raise ValueError(f"no version found in {first_line!r}")
    return match.group(0)


def program_version() -> str:
    """Return the Bitdefender scanner version."""
    return parse_program_version(exec_cmd(BDSCAN, "--version"))


def parse_detection(out: str) -> Result:
    """Turn bdscan output into a Result."""
    for line in out.split("\n"):
        if _INFECTED_MARK in line:
            return Result(
                infected=True, output=line.split(_INFECTED_MARK)[-1], out=out
            )
    return Result(out=out)
"""COMODO command-line scanner."""

from __future__ import annotations

from multiscan.result import ParseDetectionError, Result
from multiscan.utils import exec_cmd, read_all

CMDSCAN = "/opt/COMODO/cmdscan"
CAVVER = "/opt/COMODO/cavver.dat"

_CLEAN_MARK = "---> Not Virus"
_NAME_MARK = "Malware Name is "


def program_version() -> str:
    """Return the COMODO Anti-Virus version, read from its version file."""
    return read_all(CAVVER).decode("utf-8", errors="replace")


def parse_detection(out: str) -> Result:
    """Turn cmdscan output into a Result.

    The verdict sits on the second line, right after the scan banner.
    """
    lines = out.split("\n")
    if len(lines) < 2:
        raise ParseDetectionError()
    verdict = lines[1]
    if verdict.endswith(_CLEAN_MARK):
        return Result(out=out)
    return Result(infected=True, output=verdict.split(_NAME_MARK)[-1], out=out)


class Scanner:
    """Scans files with COMODO."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        # -v verbose, -s scan a file or directory.
        out = exec_cmd(CMDSCAN, "-v", "-s", file_path)
        return parse_detection(out)
"""Windows Defender engine, run under wine through mploader."""

from __future__ import annotations

import posixpath

from multiscan.result import Result
from multiscan.utils import exec_cmd

LOADLIBRARY_PATH = "/opt/windows-defender/"
MPLOADER = "./mploader.exe"
MPENGINE_DLL = "engine/mpengine.dll"

_THREAT_PREFIX = "Threat "
_NO_THREAT = "No Threat identified "
_THREAT_SUFFIX = " identified.\r"


def parse_version(out: str) -> str:
    """Extract the product version from ``exiftool -ProductVersion`` output."""
    parts = out.split(":")
    if len(parts) < 2:
        raise ValueError(f"no version found in {out!r}")
    return parts[1].strip()


def get_version() -> str:
    """Return the version of the Defender engine DLL."""
    dll = posixpath.join(LOADLIBRARY_PATH, MPENGINE_DLL)
    return parse_version(exec_cmd("exiftool", "-ProductVersion", dll))


def parse_detection(out: str) -> Result:
    """Turn mploader output into a Result."""
    for line in out.split("\n"):
        if _THREAT_PREFIX not in line or _NO_THREAT in line:
            continue
        name = line.removeprefix(_THREAT_PREFIX).removesuffix(_THREAT_SUFFIX)
        return Result(infected=True, output=name, out=out)
    return Result(out=out)


class Scanner:
    """Scans files with the Windows Defender engine."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file; mploader must run from its own directory."""
        out = exec_cmd("wine", MPLOADER, "-f", file_path, "-u", cwd=LOADLIBRARY_PATH)
        return parse_detection(out)
"""McAfee VirusScan command-line scanner (uvscan)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

CMD = "/opt/mcafee/uvscan"

_VERSION_RE = re.compile(
    r"Linux64 Version: ([\d.]+)[\s\S]+Engine version: ([\d.]+)"
    r"[\s\S]+set version: ([\d.]+)"
)
_DETECTION_RE = re.compile(
    r"Found (the|potentially unwanted program|trojan or variant) (.*)( !!!|\.)"
)

# 13: one or more viruses or hostile objects found.
_INFECTED_STATUS = 13


@dataclass
class Version:
    """Versions of the McAfee components."""

    av_engine_version: str = ""
    vdf_version: str = ""
    program_version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "scancl_version": self.av_engine_version,
            "vdf_version": self.vdf_version,
            "program_version": self.program_version,
        }


def parse_version(out: str) -> Version:
    """Extract component versions from ``uvscan --version`` output."""
    match = _VERSION_RE.search(out)
    if match is None:
        return Version()
    program, engine, vdf = match.groups()
    return Version(av_engine_version=engine, vdf_version=vdf, program_version=program)


def get_version() -> Version:
    """Return the McAfee component versions."""
    return parse_version(exec_cmd(CMD, "--version"))


def parse_detection(out: str) -> Result:
    """Turn uvscan output into a Result."""
    match = _DETECTION_RE.search(out)
    if match is None:
        return Result(out=out)
    name = match.group(2).removesuffix(" virus").removesuffix(" trojan")
    return Result(infected=True, output=name, out=out)


class Scanner:
    """Scans files with McAfee."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk with heuristics and archive scanning enabled."""
        try:
            out = exec_cmd(
                CMD,
                "--ANALYZE",
                "--ASCII",
                "--MANALYZE",
                "--MACRO-HEURISTICS",
                "--UNZIP",
                file_path,
            )
        except CommandError as exc:
            if exc.timed_out or exc.returncode != _INFECTED_STATUS:
                raise
            out = exc.output
        return parse_detection(out)
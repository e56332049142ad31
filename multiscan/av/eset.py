"""ESET command-line scanner (cls)."""

from __future__ import annotations

import re

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

CLS = "/opt/eset/efs/sbin/cls/cls"

_DETECTION_RE = re.compile(r'result="([\s\w/.]+)"', re.ASCII)

# 1: threat found and cleaned, 50: threat found.
_DETECTION_CODES = (1, 50)

_SUFFIXES = (
    "potentially unwanted application",
    "potentially unsafe application",
    " trojan",
    " Constructor",
    " worm",
)


def parse_detection(out: str) -> Result:
    """Turn cls output into a Result with a cleaned-up detection name."""
    match = _DETECTION_RE.search(out)
    if match is None:
        return Result(out=out)
    detection = match.group(1).removeprefix("a variant of")
    for suffix in _SUFFIXES:
        detection = detection.removesuffix(suffix)
    return Result(infected=True, output=detection.strip(), out=out)


class Scanner:
    """Scans files with ESET."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        try:
            out = exec_cmd(
                CLS,
                "--unsafe",
                "--unwanted",
                "--clean-mode=NONE",
                "--no-quarantine",
                file_path,
            )
        except CommandError as exc:
            if exc.timed_out or exc.returncode not in _DETECTION_CODES:
                raise
            out = exc.output
        return parse_detection(out)


def parse_program_version(out: str) -> str:
    """Extract the version, the third space-separated word of ``--version``."""
    words = out.split(" ")
    if len(words) < 3:
        raise ValueError(f"no version found in {out!r}")
    return words[2].removesuffix("\n")


def program_version() -> str:
    """Return the ESET program version."""
    return parse_program_version(exec_cmd(CLS, "--version"))
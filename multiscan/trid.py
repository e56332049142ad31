"""File type identification with TrID."""

from __future__ import annotations

from multiscan.utils import exec_cmd

TRID_CMD = "trid"
_NO_FILE_ERROR = "Error: found no file(s) to analyze!"
_HEADER_LINES = 6


def scan(file_path: str) -> list[str]:
    """Run TrID on a file and return its file type guesses."""
    return parse_output(exec_cmd(TRID_CMD, file_path))


def parse_output(output: str) -> list[str]:
    """Return TrID's guesses, skipping its banner; empty if nothing was analysed."""
    lines = output.split("\n")
    if _NO_FILE_ERROR in lines:
        return []
    return [line.strip() for line in lines[_HEADER_LINES:] if line.strip()]
"""Packer and compiler identification with Detect It Easy."""

from __future__ import annotations

from multiscan.utils import exec_cmd

CMD = "/opt/die/diec.sh"


def scan(file_path: str) -> list[str]:
    """Run Detect It Easy on a file and return its findings."""
    return parse_output(exec_cmd(CMD, file_path))


def parse_output(output: str) -> list[str]:
    """Return the non-empty lines of Detect It Easy's output."""
    return [line for line in output.split("\n") if line]
"""Sophos command-line scanner (savscan)."""

from __future__ import annotations

from dataclasses import dataclass

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

SAVSCAN = "/opt/sophos/bin/savscan"

_VIRUS_PREFIX = ">>> Virus "
_INFECTED_STATUS = 3


@dataclass
class Version:
    """Versions of the Sophos components."""

    product_version: str = ""
    engine_version: str = ""
    virus_data_version: str = ""
    user_interface_version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "product_version": self.product_version,
            "engine_version": self.engine_version,
            "virus_data_version": self.virus_data_version,
            "user_interface_version": self.user_interface_version,
        }


_VERSION_FIELDS = (
    ("Product version", "product_version"),
    ("Engine version", "engine_version"),
    ("Virus data version", "virus_data_version"),
    ("User interface version", "user_interface_version"),
)


def parse_detection(out: str) -> Result:
    """Turn savscan output into a Result."""
    for line in out.split("\n"):
        if line.startswith(_VIRUS_PREFIX):
            quoted = line.split(" ")[2]
            return Result(infected=True, output=quoted[1:-1], out=out)
    return Result(out=out)


class Scanner:
    """Scans files with Sophos."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk, including archives, mail and PUAs."""
        try:
            out = exec_cmd(
                SAVSCAN,
                "-f",
                "-nc",
                "-nb",
                "-ss",
                "-archive",
                "-loopback",
                "-mime",
                "-oe",
                "-tnef",
                "-pua",
                file_path,
            )
        except CommandError as exc:
            if exc.timed_out or exc.returncode != _INFECTED_STATUS:
                raise
            out = exc.output
        return parse_detection(out)


def parse_version(out: str) -> Version:
    """Extract component versions from ``savscan --version`` output."""
    version = Version()
    for line in out.split("\n"):
        for label, attr in _VERSION_FIELDS:
            if label in line:
                setattr(version, attr, line.partition(":")[2].strip())
                break
    return version


def get_version() -> Version:
    """Return the Sophos component versions."""
    return parse_version(exec_cmd(SAVSCAN, "--version"))
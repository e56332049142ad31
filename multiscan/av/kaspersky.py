"""Kaspersky Endpoint Security scanner, driven through kesl-control."""

from __future__ import annotations

from dataclasses import dataclass

from multiscan.result import ParseDetectionError, Result
from multiscan.utils import CommandError, exec_background, exec_cmd

KESL = "/opt/kaspersky/kesl/bin/kesl-control"
KESL_LAUNCHER = "/opt/kaspersky/kesl/libexec/kesl_launcher.sh"

_DETECTED_MARK = "Total detected objects              : 1"
_QUERY_SEPARATOR = ", query res: "
_THREAT_QUERY = "EventType=='ThreatDetected'"
# Line of the last event block that holds ``DetectName=...``.
_DETECT_NAME_LINE = 9


@dataclass
class Version:
    """Versions and state of the anti-virus databases."""

    current_av_databases_date: str = ""
    last_av_databases_update_date: str = ""
    current_av_databases_state: str = ""
    current_av_databases_records: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "current_av_db_ate": self.current_av_databases_date,
            "last_av_db_update_date": self.last_av_databases_update_date,
            "current_av_db_state": self.current_av_databases_state,
            "current_av_db_records": self.current_av_databases_records,
        }


_DATABASE_FIELDS = (
    ("Current AV databases date", "current_av_databases_date"),
    ("Last AV databases update date", "last_av_databases_update_date"),
    ("Current AV databases state", "current_av_databases_state"),
    ("Current AV databases records", "current_av_databases_records"),
)


def parse_program_version(out: str) -> str:
    """Extract the application version from ``--app-info`` output."""
    for line in out.split("\n"):
        if "Version:" in line:
            return line.removeprefix("Version:").strip()
    return ""


def get_program_version() -> str:
    """Return the Kaspersky Endpoint Security version."""
    return parse_program_version(exec_cmd("sudo", KESL, "-S", "--app-info"))


def parse_database_version(out: str) -> Version:
    """Extract database information from ``--get-stat Update`` output."""
    version = Version()
    for line in out.split("\n"):
        for label, attr in _DATABASE_FIELDS:
            if label in line:
                setattr(version, attr, line.removeprefix(label + ":").strip())
                break
    return version


def get_database_version() -> Version:
    """Return the database versions; empty when the query fails."""
    try:
        out = exec_cmd("sudo", KESL, "--get-stat", "Update")
    except CommandError:
        return Version()
    return parse_database_version(out)


def parse_detection(out: str) -> Result:
    """Pull the detection name out of the last reported threat event."""
    last_block = out.split("\n\n")[-1]
    lines = last_block.split("\n")
    if len(lines) <= _DETECT_NAME_LINE - 1:
        return Result(out=out)
    if len(lines) <= _DETECT_NAME_LINE or "=" not in lines[_DETECT_NAME_LINE]:
        raise ParseDetectionError()
    name = lines[_DETECT_NAME_LINE].split("=")[1].strip()
    return Result(infected=True, output=name, out=out)


class Scanner:
    """Scans files with Kaspersky."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file, then query the event log for the detection name."""
        out = exec_cmd("sudo", KESL, "--scan-file", file_path, "--action", "Skip")
        if _DETECTED_MARK not in out:
            return Result(out=out)
        query = exec_cmd("sudo", KESL, "-E", "--query", _THREAT_QUERY)
        return parse_detection(out + _QUERY_SEPARATOR + query)


def get_license_infos() -> str:
    """Return the raw license information."""
    return exec_cmd("sudo", KESL, "-L", "--query")


def start_daemon() -> None:
    """Start the Kaspersky daemon in the background."""
    exec_background("sudo", KESL_LAUNCHER, "-n", "-D")
"""F-Secure command-line scanner (fsav)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd

FSAV = "/opt/f-secure/fsav/bin/fsav"

# 3: virus found, 4: riskware, 6: virus removed, 8: suspicious files.
_DETECTION_CODES = (3, 4, 6, 8)
_ENGINE_TAGS = (" [Aquarius]", " [FSE]")
_PAREN_RE = re.compile(r" \(.*\)")


@dataclass
class Version:
    """Versions of the F-Secure components."""

    fsecure_version: str = ""
    database_version: str = ""
    hydra_engine_version: str = ""
    hydra_database_version: str = ""
    aquarius_engine_version: str = ""
    aquarius_database_version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "fsecure_version": self.fsecure_version,
            "database_version": self.database_version,
            "hydra_engine_version": self.hydra_engine_version,
            "hydra_db_version": self.hydra_database_version,
            "aquarius_engine_version": self.aquarius_engine_version,
            "aquarius_db_version": self.aquarius_database_version,
        }


def _tagged_detection(line: str, mark: str) -> str | None:
    """Return the detection after ``mark`` with its engine tag removed."""
    detection = line.split(mark)[-1]
    for tag in _ENGINE_TAGS:
        if tag in detection:
            return detection.removesuffix(tag)
    return None


def parse_detection(out: str) -> Result:
    """Turn fsav output into a Result; the last reported detection wins."""
    result = Result(out=out)
    for line in out.split("\n"):
        if "Infected: " in line:
            detection = _tagged_detection(line, "Infected: ")
            if detection is not None:
                result.output = detection
                result.infected = True
                continue
        if "Riskware: " in line:
            detection = _tagged_detection(line, "Riskware: ")
            if detection is not None:
                result.output = _PAREN_RE.sub("", detection)
                result.infected = True
    return result


class Scanner:
    """Scans files with F-Secure."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        try:
            out = exec_cmd(
                FSAV,
                "--virus-action1=report",
                "--suspected-action1=report",
                file_path,
            )
        except CommandError as exc:
            if exc.timed_out or exc.returncode not in _DETECTION_CODES:
                raise
            out = exc.output
        return parse_detection(out)


def parse_version(out: str) -> Version:
    """Extract component versions from ``fsav --version`` output."""
    version = Version()
    for line in out.split("\n"):
        if "Database version: " in line:
            version.database_version = line.removeprefix("Database version: ")
        elif "F-Secure Linux Security version " in line:
            version.fsecure_version = line.removeprefix(
                "F-Secure Linux Security version "
            ).strip()
        elif "Hydra engine version" in line:
            version.hydra_engine_version = line.removeprefix(
                "\tF-Secure Corporation Hydra engine version "
            ).strip()
        elif "Hydra database version" in line:
            version.hydra_database_version = line.removeprefix(
                "\tF-Secure Corporation Hydra database version "
            ).strip()
        elif "Aquarius engine version" in line:
            version.aquarius_engine_version = line.removeprefix(
                "\tF-Secure Corporation Aquarius engine version "
            ).strip()
        elif "Aquarius database version" in line:
            version.aquarius_database_version = line.removeprefix(
                "\tF-Secure Corporation Aquarius database version "
            ).strip()
    return version


def get_version() -> Version:
    """Return the F-Secure component versions."""
    return parse_version(exec_cmd(FSAV, "--version"))
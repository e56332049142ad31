"""Avira command-line scanner (scancl)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO

from multiscan.result import Result
from multiscan.utils import CommandError, exec_cmd, write_bytes_file

CMD = "/opt/avira/scancl"
LICENSE_KEY_PATH = "/opt/avira/hbedv.key"
"""Location of the license key."""

_DETECTION_RE = re.compile(r"ALERT: \[(.*)\] ")
_EXPIRES_RE = re.compile(r"key expires:        ([\w\s]+)\n\n", re.ASCII)

# 1: concerning files, 2: signature in memory, 3: suspicious, 101: macro.
_DETECTION_CODES = (1, 2, 3, 101)
_NO_LICENSE_STATUS = 214


class LicenseError(Exception):
    """Base class for license problems."""


class NoLicenseFoundError(LicenseError):
    """No license is installed."""

    def __init__(self, message: str = "no license found") -> None:
        super().__init__(message)


class InvalidLicenseError(LicenseError):
    """The installed license is invalid."""

    def __init__(self, message: str = "invalid license") -> None:
        super().__init__(message)


class ExpiredLicenseError(LicenseError):
    """The installed license has expired."""

    def __init__(self, message: str = "license expired") -> None:
        super().__init__(message)


class LicenseUnknownError(LicenseError):
    """The license status could not be understood."""

    def __init__(self, message: str = "license parsing failed") -> None:
        super().__init__(message)


@dataclass
class Version:
    """Versions of the Avira components."""

    scancl_version: str = ""
    core_version: str = ""
    vdf_version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "scancl_version": self.scancl_version,
            "core_version": self.core_version,
            "vdf_version": self.vdf_version,
        }


_VERSION_FIELDS = (
    ("scancl Version:", "scancl_version"),
    ("core Version:", "core_version"),
    ("VDF Version:", "vdf_version"),
)


def parse_version(out: str) -> Version:
    """Extract component versions from ``scancl --version`` output."""
    version = Version()
    for line in out.split("\n"):
        for label, attr in _VERSION_FIELDS:
            if label in line:
                setattr(version, attr, line.removeprefix(label).strip())
                break
    return version


def get_version() -> Version:
    """Return the ScanCL, core and VDF versions."""
    return parse_version(exec_cmd(CMD, "--version"))


def parse_detection(out: str) -> Result:
    """Turn scancl output into a Result."""
    match = _DETECTION_RE.search(out)
    if match is None:
        return Result(out=out)
    return Result(infected=True, output=match.group(1), out=out)


class Scanner:
    """Scans files with Avira."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        try:
            out = exec_cmd(
                CMD, "--nombr", "--nostats", "--quarantine=/tmp", file_path
            )
        except CommandError as exc:
            if exc.timed_out or exc.returncode not in _DETECTION_CODES:
                raise
            out = exc.output
        return parse_detection(out)


def parse_license(out: str) -> str:
    """Return the license expiry date from scancl output, or raise."""
    if "invalid license" in out:
        raise InvalidLicenseError()
    if "This key has expired" in out:
        raise ExpiredLicenseError()
    if "key expires:" in out:
        match = _EXPIRES_RE.search(out)
        if match is not None:
            return match.group(1)
    raise LicenseUnknownError()


def license_status() -> str:
    """Check the installed license and return its expiry date."""
    try:
        out = exec_cmd(CMD, "-v")
    except CommandError as exc:
        if not exc.timed_out and exc.returncode == _NO_LICENSE_STATUS:
            raise NoLicenseFoundError() from exc
        raise
    return parse_license(out)


def activate_license(reader: BinaryIO) -> str:
    """Install a license key and return its expiry date."""
    write_bytes_file(LICENSE_KEY_PATH, reader)
    return license_status()
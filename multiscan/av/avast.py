"""Avast command-line scanner."""

from __future__ import annotations

import os
from typing import BinaryIO

from multiscan.result import ParseDetectionError, Result
from multiscan.utils import (
    DEFAULT_TIMEOUT,
    CommandError,
    chown_file_username,
    exec_background,
    exec_cmd,
    write_bytes_file,
)

CMD = "scan"
AVAST_DAEMON = "/usr/bin/avast"
LICENSE_FILE = "/etc/avast/license.avastlic"
VPS_UPDATE = "/usr/lib/avast/avast.setup"
SCAN_TIMEOUT = 10.0
TMP_FILENAME = "tmpFile"

# Exit status 1 means an infection was found; 2 is a real error.
_INFECTED_STATUS = 1
_NOT_RUNNING_STATUS = 3


class LicenseExpiredError(Exception):
    """The installed Avast license has expired."""

    def __init__(self, message: str = "license was expired") -> None:
        super().__init__(message)


def _run(
    name: str,
    *args: str,
    ok_codes: tuple[int, ...] = (),
    timeout: float | None = DEFAULT_TIMEOUT,
) -> str:
    try:
        return exec_cmd(name, *args, timeout=timeout)
    except CommandError as exc:
        if not exc.timed_out and exc.returncode in ok_codes:
            return exc.output
        raise


def vps_version() -> str:
    """Return the virus definitions (VPS) version."""
    return exec_cmd(CMD, "-V").strip()


def program_version() -> str:
    """Return the scanner program version."""
    return exec_cmd(CMD, "-v").strip()


def parse_detection(out: str) -> Result:
    """Turn the output of a file scan into a Result."""
    if "[OK]" in out:
        return Result(out=out)
    fields = out.split("\t")
    if len(fields) < 2:
        raise ParseDetectionError()
    return Result(infected=True, output=fields[1].strip(), out=out)


def parse_url_detection(out: str) -> Result:
    """Turn the output of a URL scan into a Result."""
    if out == "":
        return Result()
    fields = out.split("\t")
    if len(fields) < 2:
        raise ParseDetectionError()
    return Result(infected=True, output=fields[1].strip())


class Scanner:
    """Scans files and URLs with Avast."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file on disk."""
        if not os.path.exists(file_path):
            raise FileNotFoundError(file_path)
        # -a all files, -b report decompression bombs, -f full files, -u PUPs.
        out = _run(
            CMD,
            "-abfu",
            file_path,
            ok_codes=(_INFECTED_STATUS,),
            timeout=SCAN_TIMEOUT,
        )
        return parse_detection(out)

    def scan_reader(self, reader: BinaryIO) -> Result:
        """Write the stream to a temporary file and scan it."""
        write_bytes_file(TMP_FILENAME, reader)
        return self.scan_file(TMP_FILENAME)

    def scan_url(self, url: str) -> Result:
        """Scan a URL."""
        out = _run(CMD, "-U", url, ok_codes=(_INFECTED_STATUS,))
        return parse_url_detection(out)


def update_vps() -> None:
    """Update the virus definitions."""
    exec_cmd(VPS_UPDATE)


def is_license_expired() -> bool:
    """Return True if the installed license has expired."""
    if not os.path.exists(LICENSE_FILE):
        raise FileNotFoundError("license not found")
    out = exec_cmd(AVAST_DAEMON, "status")
    return "License expired" in out


def restart_service() -> None:
    """Start the Avast service, or restart it if it is already running."""
    try:
        exec_cmd(AVAST_DAEMON, "status")
    except CommandError as exc:
        if exc.timed_out or exc.returncode != _NOT_RUNNING_STATUS:
            raise
        exec_cmd(AVAST_DAEMON, "start")
        return
    exec_cmd(AVAST_DAEMON, "restart")


def activate_license(reader: BinaryIO) -> None:
    """Install a license file, restart the service and check the license."""
    write_bytes_file(LICENSE_FILE, reader)
    chown_file_username(LICENSE_FILE, "avast")
    restart_service()
    if is_license_expired():
        raise LicenseExpiredError()


def start_daemon() -> None:
    """Start the Avast daemon in the background."""
    exec_background("sudo", AVAST_DAEMON)
"""Trend Micro ServerProtect for Linux scanner, driven through splxmain."""

from __future__ import annotations

import os
import re
import tempfile
import time
from dataclasses import dataclass
from datetime import datetime

from multiscan.result import Result
from multiscan.utils import (
    CommandError,
    copy_file,
    delete_dir_content,
    exec_cmd,
    read_all,
)

SPLXMAIN = "/opt/TrendMicro/SProtectLinux/SPLX.vsapiapp/splxmain"
LOG_DIR = "/var/log/TrendMicro/SProtectLinux/"
TMSPLX = "/opt/TrendMicro/SProtectLinux/tmsplx.xml"
SPLX = "/etc/init.d/splx"
DAEMON_TIMEOUT = 30.0

_WAIT_ATTEMPTS = 5
_WAIT_INTERVAL = 1.0

_ENGINE_RE = re.compile(r'<P Name="EngineVersion" Value="(.*)"/>')
_PATTERN_RE = re.compile(r'<P Name="PatternVersion" Value="(.*)"/>')
_SPYWARE_RE = re.compile(r'<P Name="SpywarePatternVersion" Value="(.*)"/>')
_VIRUS_NAME_RE = re.compile(r"virus_name=(.*)")


@dataclass
class Version:
    """Versions of the Trend Micro engine and patterns."""

    engine_version: str = ""
    pattern_version: str = ""
    spyware_pattern_version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "engine_version": self.engine_version,
            "pattern_version": self.pattern_version,
            "spyware_pattern_version": self.spyware_pattern_version,
        }


def _first_group(regex: re.Pattern[str], data: str) -> str:
    match = regex.search(data)
    return match.group(1) if match else ""


def parse_version(data: str) -> Version:
    """Extract versions from the content of tmsplx.xml."""
    return Version(
        engine_version=_first_group(_ENGINE_RE, data),
        pattern_version=_first_group(_PATTERN_RE, data),
        spyware_pattern_version=_first_group(_SPYWARE_RE, data),
    )


def get_version() -> Version:
    """Return the engine, virus pattern and spyware pattern versions."""
    return parse_version(read_all(TMSPLX).decode("utf-8", errors="replace"))


def find_virus_name(data: str) -> str | None:
    """Return the ``virus_name`` recorded in a Virus or Spyware log, if any."""
    match = _VIRUS_NAME_RE.search(data)
    return match.group(1) if match else None


def _wait_for_scan_log(scan_log: str) -> None:
    for _ in range(_WAIT_ATTEMPTS):
        time.sleep(_WAIT_INTERVAL)
        exec_cmd("sudo", "chmod", "-R", "0777", LOG_DIR)
        try:
            if os.path.getsize(scan_log) > 0:
                return
        except OSError:
            continue


def _read_log(path: str) -> tuple[str, OSError | None]:
    try:
        return read_all(path).decode("utf-8", errors="replace"), None
    except OSError as exc:
        return "", exc


class Scanner:
    """Scans files with Trend Micro."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file; the verdict is read back from the day's log files."""
        delete_dir_content(LOG_DIR)

        # splxmain only scans directories, so the file is copied into one.
        temp_dir = tempfile.mkdtemp(dir="/tmp", prefix="trendmicro")
        file_copy = os.path.join(temp_dir, os.path.basename(file_path))
        copy_file(file_path, file_copy)

        exec_cmd("sudo", SPLXMAIN, "-m", os.path.dirname(file_copy))

        today = datetime.now().strftime("%Y%m%d")
        _wait_for_scan_log(os.path.join(LOG_DIR, f"Scan.{today}.0001"))

        virus_data, virus_err = _read_log(os.path.join(LOG_DIR, f"Virus.{today}.0001"))
        result = Result(out="VirusOut: " + virus_data)
        if virus_err is None:
            name = find_virus_name(result.out)
            if name is not None:
                result.output, result.infected = name, True
                return result

        spyware_data, spyware_err = _read_log(
            os.path.join(LOG_DIR, f"Spyware.{today}.0001")
        )
        result.out += "SpywareOut: " + spyware_data
        if spyware_err is None and spyware_data:
            name = find_virus_name(result.out)
            if name is not None:
                result.output, result.infected = name, True
                return result

        if virus_err is not None:
            raise virus_err
        if spyware_err is not None:
            raise spyware_err
        return result


def start_daemon() -> None:
    """Restart the Trend Micro service."""
    try:
        exec_cmd("sudo", SPLX, "restart", timeout=DAEMON_TIMEOUT)
    except CommandError as exc:
        raise RuntimeError(
            f"failed to start daemon, err: {exc}, out:{exc.output}"
        ) from exc
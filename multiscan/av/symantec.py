"""Symantec Endpoint Protection scanner, driven through sav."""

from __future__ import annotations

import os
import shutil
import time
from datetime import datetime

from multiscan.result import ParseDetectionError, Result
from multiscan.utils import CommandError, create_file, exec_cmd, read_all

CMD = "/opt/Symantec/symantec_antivirus/sav"
LOGS_DIR = "/var/symantec/sep/Logs/"
SYMCFGD = "/opt/Symantec/symantec_antivirus/symcfgd"
RTVSCAND = "/opt/Symantec/symantec_antivirus/rtvscand"
DAEMON_TIMEOUT = 30.0

_CLEAN_MARK = "Scan Complete:  Threats: 0"
# Comma-separated field of a detection record holding the threat name.
_NAME_FIELD = 6


def get_program_version() -> str:
    """Return the Symantec program version."""
    return exec_cmd(CMD, "info", "-p").removesuffix("\n")


def log_file_name(when: datetime) -> str:
    """Return the path of the scan log written on the day of ``when``."""
    return LOGS_DIR + when.strftime("%m%d%Y") + ".log"


def parse_log(data: str) -> Result:
    """Turn the content of a scan log into a Result.

    The second record of the log describes the detected threat.
    """
    if _CLEAN_MARK in data:
        return Result(out=data)
    lines = data.split("\n")
    if len(lines) < 2:
        raise ParseDetectionError()
    fields = lines[1].split(",")
    if len(fields) <= _NAME_FIELD:
        raise ParseDetectionError()
    return Result(infected=True, output=fields[_NAME_FIELD], out=data)


class Scanner:
    """Scans files with Symantec."""

    def scan_file(self, file_path: str) -> Result:
        """Scan a file; the verdict is read back from the day's log file."""
        logfile = log_file_name(datetime.now())
        try:
            shutil.rmtree(LOGS_DIR)
        except FileNotFoundError:
            pass
        os.makedirs(LOGS_DIR, mode=0o777, exist_ok=True)
        create_file(logfile)
        exec_cmd("sudo", CMD, "manualscan", "--clscan", file_path)
        data = read_all(logfile).decode("utf-8", errors="replace")
        return parse_log(data)


def start_daemon() -> None:
    """Start the symcfgd and rtvscand daemons within one shared deadline."""
    deadline = time.monotonic() + DAEMON_TIMEOUT
    for name, daemon in (("symcfgd", SYMCFGD), ("rtvscand", RTVSCAND)):
        remaining = max(deadline - time.monotonic(), 0.0)
        try:
            exec_cmd("sudo", daemon, "-x", timeout=remaining)
        except CommandError as exc:
            raise RuntimeError(
                f"failed to start {name} daemon, err: {exc}, out:{exc.output}"
            ) from exc
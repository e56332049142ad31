import subprocess
from unittest import mock

import pytest

from multiscan.av import drweb
from multiscan.utils import CommandError

BASEINFO = (
    "Core engine version: 7.00.47.04280\n"
    "Virus database timestamp: 2020-Aug-11 18:40:16\n"
    "Virus database fingerprint: D2EFA560783BC31243E97B3B73766C18\n"
    "Virus databases loaded: 202\n"
    "Virus records: 9118543\n"
    "Anti-spam core is not loaded\n"
)

INFECTED_OUTPUT = (
    "/samples/765c3a580f885f5e4e4f98a709e9f0ce - infected with Trojan.Siggen2.24456\n"
    "Scanned objects: 1, scan errors: 0, threats found: 1, threats neutralized: 0.\n"
    "Scanned 0.07 KB in 0.08 s with speed 0.80 KB/s.\n"
)

CLEAN_OUTPUT = (
    "/samples/putty - Ok\n"
    "Scanned objects: 1, scan errors: 0, threats found: 0, threats neutralized: 0.\n"
)


def _completed(returncode, stdout):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


def test_parse_version():
    assert drweb.parse_version(BASEINFO) == "7.00.47.04280"


def test_parse_version_missing():
    assert drweb.parse_version("Virus records: 9118543\n") == ""


def test_version_runs_baseinfo():
    with mock.patch("subprocess.run", return_value=_completed(0, BASEINFO.encode())) as run:
        assert drweb.version() == "7.00.47.04280"
    assert run.call_args.args[0] == [drweb.CMD, "baseinfo"]


def test_parse_detection_infected():
    result = drweb.parse_detection(INFECTED_OUTPUT)
    assert (result.infected, result.output) == (True, "Trojan.Siggen2.24456")


def test_parse_detection_eicar_name_kept_whole():
    result = drweb.parse_detection("/eicar - infected with EICAR Test File (NOT a Virus!)\n")
    assert result.output == "EICAR Test File (NOT a Virus!)"


def test_parse_detection_clean():
    result = drweb.parse_detection(CLEAN_OUTPUT)
    assert result.infected is False
    assert result.output == ""


def test_scan_file_infected():
    with mock.patch(
        "subprocess.run", return_value=_completed(0, INFECTED_OUTPUT.encode())
    ) as run:
        result = drweb.Scanner().scan_file("/samples/sample")
    assert (result.infected, result.output) == (True, "Trojan.Siggen2.24456")
    assert run.call_args.args[0] == [drweb.CMD, "scan", "/samples/sample"]


def test_scan_file_error_raises():
    with mock.patch("subprocess.run", return_value=_completed(23, b"No such file")):
        with pytest.raises(CommandError) as info:
            drweb.Scanner().scan_file("/missing")
    assert info.value.returncode == 23


def test_start_daemon_failure():
    with mock.patch("subprocess.run", return_value=_completed(1, b"denied")):
        with pytest.raises(RuntimeError, match="out:denied"):
            drweb.start_daemon()
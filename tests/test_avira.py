import io
import re
import subprocess
from unittest.mock import patch

import pytest

from multiscan.av import avira
from multiscan.utils import CommandError

VERSION_OUT = """Avira / Linux Version 1.9.161.2
Command line scanner banner
Second banner line

operating system:   Linux
architecture:       ia32
system date:        Dec 27 2018
scancl Version:     1.9.161.2
core Version:       1.9.2.0
VDF Version:        7.15.16.96
"""

LICENSE_OUT = """key file:           /opt/avira/hbedv.key
registered user:    Free
serial number:      0000000000
key expires:        Dec 31 2999

Scan start time
"""


def completed(output, returncode=0):
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=output.encode()
    )


def test_version():
    four_part = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")
    with patch("subprocess.run", return_value=completed(VERSION_OUT)) as run:
        ver = avira.get_version()
    assert four_part.search(ver.scancl_version)
    assert four_part.search(ver.core_version)
    assert four_part.search(ver.vdf_version)
    assert ver == avira.Version("1.9.161.2", "1.9.2.0", "7.15.16.96")
    assert run.call_args.args[0] == [avira.CMD, "--version"]


def test_version_to_dict():
    ver = avira.parse_version(VERSION_OUT)
    assert ver.to_dict()["vdf_version"] == "7.15.16.96"


def test_scan_file_infected():
    path = "/samples/765c3a580f885f5e4e4f98a709e9f0ce"
    out = f"configuration file: x\nALERT: [TR/Crypt.XPACK.Gen2] {path} <<< Is the Trojan\n"
    with patch("subprocess.run", return_value=completed(out, 1)) as run:
        got = avira.Scanner().scan_file(path)
    assert (got.infected, got.output) == (True, "TR/Crypt.XPACK.Gen2")
    assert run.call_args.args[0] == [
        avira.CMD, "--nombr", "--nostats", "--quarantine=/tmp", path,
    ]


@pytest.mark.parametrize("code", [2, 3, 101])
def test_scan_file_detection_codes_accepted(code):
    out = "ALERT: [EXP/X] /f <<< x\n"
    with patch("subprocess.run", return_value=completed(out, code)):
        assert avira.Scanner().scan_file("/f").output == "EXP/X"


def test_scan_file_clean():
    with patch("subprocess.run", return_value=completed("nothing found\n")):
        got = avira.Scanner().scan_file("/f")
    assert (got.infected, got.output) == (False, "")


def test_scan_file_abort_code():
    with patch("subprocess.run", return_value=completed("", 203)):
        with pytest.raises(CommandError) as info:
            avira.Scanner().scan_file("/f")
    assert info.value.returncode == 203


def test_license_status():
    with patch("subprocess.run", return_value=completed(LICENSE_OUT)):
        assert avira.license_status() == "Dec 31 2999"


def test_no_license_found():
    with patch("subprocess.run", return_value=completed("", 214)):
        with pytest.raises(avira.NoLicenseFoundError):
            avira.license_status()


@pytest.mark.parametrize(
    "out, error",
    [
        ("invalid license\n", avira.InvalidLicenseError),
        ("This key has expired\n", avira.ExpiredLicenseError),
        ("something else\n", avira.LicenseUnknownError),
        ("key expires: Dec\n", avira.LicenseUnknownError),
    ],
)
def test_parse_license_errors(out, error):
    with pytest.raises(error):
        avira.parse_license(out)


def test_license_errors_share_base():
    with pytest.raises(avira.LicenseError):
        avira.parse_license("invalid license")


def test_activate_license(tmp_path, monkeypatch):
    key_path = tmp_path / "hbedv.key"
    monkeypatch.setattr(avira, "LICENSE_KEY_PATH", str(key_path))
    with patch("subprocess.run", return_value=completed(LICENSE_OUT)):
        assert avira.activate_license(io.BytesIO(b"key-data")) == "Dec 31 2999"
    assert key_path.read_bytes() == b"key-data"
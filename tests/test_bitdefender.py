import re
import subprocess
from unittest.mock import patch

import pytest

from multiscan.av import bitdefender
from multiscan.utils import CommandError

BANNER = (
    "BitDefender Antivirus Scanner for Unices v7.141118 Linux-amd64\n"
    "Command line scanner banner\n"
)


def completed(output, returncode=0):
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=output.encode()
    )


def test_program_version():
    with patch("subprocess.run", return_value=completed(BANNER)) as run:
        version = bitdefender.program_version()
    assert re.search(r"\d\.\d{6}", version)
    assert version == "v7.141118"
    assert run.call_args.args[0] == [bitdefender.BDSCAN, "--version"]


def test_parse_program_version_missing():
    with pytest.raises(ValueError):
        bitdefender.parse_program_version("no version here\n")


def test_scan_file_infected():
    path = "../../test/testdata/765c3a580f885f5e4e4f98a709e9f0ce"
    out = (
        BANNER
        + "\nInfected file action: ignore\nPlugins loaded.\n\n"
        + f"{path}  infected: Gen:Trojan.Heur.Renos.emGfcGojBdec\n"
    )
    with patch("subprocess.run", return_value=completed(out, 1)) as run:
        got = bitdefender.Scanner().scan_file(path)
    assert (got.infected, got.output) == (
        True,
        "Gen:Trojan.Heur.Renos.emGfcGojBdec",
    )
    assert run.call_args.args[0] == [bitdefender.BDSCAN, "--action=ignore", path]


def test_scan_file_clean():
    with patch("subprocess.run", return_value=completed(BANNER + "/f  ok\n")):
        got = bitdefender.Scanner().scan_file("/f")
    assert (got.infected, got.output) == (False, "")


def test_scan_file_license_expired():
    with patch("subprocess.run", return_value=completed("", 254)):
        with pytest.raises(CommandError) as info:
            bitdefender.Scanner().scan_file("/f")
    assert str(info.value) == "exit status 254"


def test_parse_detection_first_match_wins():
    out = "a  infected: One\nb  infected: Two\n"
    assert bitdefender.parse_detection(out).output == "One"
import subprocess
from unittest import mock

import pytest

from multiscan.av import sophos
from multiscan.utils import CommandError

VERSION_OUT = (
    "SAVScan virus detection utility\n"
    "\n"
    "System time 19:28:51, System date 24 December 2018\n"
    "\n"
    "Product version           : 5.53.0\n"
    "Engine version            : 3.74.2\n"
    "Virus data version        : 5.55\n"
    "User interface version    : 2.03.074\n"
    "Platform                  : Linux/AMD64\n"
    "Released                  : 18 September 2018\n"
)

INFECTED_OUT = (
    ">>> Virus 'Mal/FakeAV-IV' found in file "
    "/samples/765c3a580f885f5e4e4f98a709e9f0ce\n"
)


def _completed(output, code=0):
    return subprocess.CompletedProcess([], code, stdout=output.encode())


def test_parse_detection_infected():
    res = sophos.parse_detection(INFECTED_OUT)
    assert res.infected is True
    assert res.output == "Mal/FakeAV-IV"


def test_parse_detection_clean():
    res = sophos.parse_detection("\n")
    assert (res.infected, res.output) == (False, "")


def test_parse_version():
    ver = sophos.parse_version(VERSION_OUT)
    assert ver == sophos.Version(
        product_version="5.53.0",
        engine_version="3.74.2",
        virus_data_version="5.55",
        user_interface_version="2.03.074",
    )
    assert ver.to_dict()["engine_version"] == "3.74.2"


@mock.patch("subprocess.run")
def test_scan_file_infected(run):
    run.return_value = _completed(INFECTED_OUT, 3)
    res = sophos.Scanner().scan_file("/samples/765c3a580f885f5e4e4f98a709e9f0ce")
    assert (res.infected, res.output) == (True, "Mal/FakeAV-IV")


@mock.patch("subprocess.run")
def test_scan_file_error(run):
    run.return_value = _completed("error", 2)
    with pytest.raises(CommandError) as info:
        sophos.Scanner().scan_file("/samples/x")
    assert info.value.returncode == 2


@mock.patch("subprocess.run")
def test_get_version(run):
    run.return_value = _completed(VERSION_OUT)
    assert sophos.get_version().product_version == "5.53.0"
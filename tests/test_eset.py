import subprocess
from unittest import mock

import pytest

from multiscan.av import eset
from multiscan.utils import CommandError


def _completed(returncode, stdout):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


def _report(result):
    return (
        "Scan started at:   Tue Jan  1 01:32:57 2019\n"
        f'name="/samples/sample", result="{result}", action="retained", info=""\n'
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Win32/TrojanDownloader.Wauchos.A trojan", "Win32/TrojanDownloader.Wauchos.A"),
        (
            "a variant of Win32/TrojanDownloader.FakeAlert.BBT trojan",
            "Win32/TrojanDownloader.FakeAlert.BBT",
        ),
        ("Win32/Adware.Foo potentially unwanted application", "Win32/Adware.Foo"),
        ("Win32/Tool.Bar potentially unsafe application", "Win32/Tool.Bar"),
        ("Win32/Virus.Gen Constructor", "Win32/Virus.Gen"),
        ("Win32/Mydoom.A worm", "Win32/Mydoom.A"),
    ],
)
def test_parse_detection_cleans_names(raw, expected):
    result = eset.parse_detection(_report(raw))
    assert result.infected is True
    assert result.output == expected


def test_parse_detection_clean():
    out = 'name="/samples/putty", result="", action="", info=""\n'
    result = eset.parse_detection(out)
    assert result.infected is False
    assert result.output == ""


def test_scan_file_accepts_threat_found_status():
    out = _report("a variant of Win32/TrojanDownloader.FakeAlert.BBT trojan")
    with mock.patch("subprocess.run", return_value=_completed(50, out.encode())) as run:
        result = eset.Scanner().scan_file("/samples/sample")
    assert (result.infected, result.output) == (
        True,
        "Win32/TrojanDownloader.FakeAlert.BBT",
    )
    assert run.call_args.args[0][-1] == "/samples/sample"
    assert "--no-quarantine" in run.call_args.args[0]


def test_scan_file_error_status_raises():
    with mock.patch("subprocess.run", return_value=_completed(100, b"error")):
        with pytest.raises(CommandError) as info:
            eset.Scanner().scan_file("/samples/sample")
    assert info.value.returncode == 100


def test_parse_program_version():
    assert eset.parse_program_version("ESET Command-line 4.5.13\n") == "4.5.13"


def test_parse_program_version_too_short():
    with pytest.raises(ValueError):
        eset.parse_program_version("ESET\n")


def test_program_version_runs_cls():
    with mock.patch(
        "subprocess.run", return_value=_completed(0, b"ESET Command-line 4.5.13\n")
    ) as run:
        assert eset.program_version() == "4.5.13"
    assert run.call_args.args[0] == [eset.CLS, "--version"]
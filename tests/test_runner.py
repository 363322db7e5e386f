"""Tests for aggregating reports over many files."""

import json
import subprocess
from pathlib import Path

import pytest

from conftest import make_runner
from nixf_diagnose.config import Config
from nixf_diagnose.errors import SourceReadError
from nixf_diagnose.findings.models import Report, ReportKind
from nixf_diagnose.runner import analyze_files, exit_code_for


def _advice(start: int, end: int) -> bytes:
    return json.dumps(
        [
            {
                "sname": "sema-extra-with",
                "message": "unused `with` expression",
                "severity": 4,
                "args": [],
                "range": {"lCur": {"offset": start}, "rCur": {"offset": end}},
                "notes": [],
            }
        ]
    ).encode()


def _files(tmp_path: Path, count: int) -> list[Path]:
    paths = []
    for i in range(count):
        path = tmp_path / f"f{i}.nix"
        path.write_text("with pkgs; 1")
        paths.append(path)
    return paths


def test_no_files():
    assert analyze_files(Config(), []) == []


@pytest.mark.parametrize("jobs", [1, 4])
def test_reports_from_all_files(tmp_path, jobs):
    paths = _files(tmp_path, 5)
    reports = analyze_files(Config(jobs=jobs), paths, runner=make_runner(_advice(0, 4)))
    assert len(reports) == 5
    assert {r.path for r in reports} == set(paths)


def test_failed_file_does_not_stop_others(tmp_path):
    paths = _files(tmp_path, 3)
    calls = []

    def runner(cmd, **kwargs):
        calls.append(cmd)
        returncode = 1 if len(calls) == 1 else 0
        return subprocess.CompletedProcess(cmd, returncode, stdout=b"[]")

    reports = analyze_files(Config(jobs=1), paths, runner=runner)
    assert reports == []
    assert exit_code_for(reports) == 0
    assert len(calls) == 3


def test_fatal_error_propagates(tmp_path):
    paths = _files(tmp_path, 2) + [tmp_path / "missing.nix"]
    with pytest.raises(SourceReadError):
        analyze_files(Config(jobs=3), paths, runner=make_runner())


def test_exit_code_ignores_severity(tmp_path):
    advice = Report(kind=ReportKind.ADVICE, message="m", path=tmp_path, source="")
    assert exit_code_for([]) == 0
    assert exit_code_for([advice]) == 1


def test_advice_only_run_fails(tmp_path):
    paths = _files(tmp_path, 3)
    reports = analyze_files(Config(), paths, runner=make_runner(_advice(0, 4)))
    assert all(r.kind is ReportKind.ADVICE for r in reports)
    assert exit_code_for(reports) == 1

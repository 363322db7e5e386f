"""Shared fixtures: a fake nixf-tidy executable and a fake subprocess runner."""

import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

# Emits one sema-unused-def-let warning (with a fix deleting the name) for
# every "unused" in the input. "CRASH" makes it exit 1, "GARBAGE" makes it
# print non-JSON. Its argv is written next to the script.
FAKE_NIXF_TIDY = textwrap.dedent(
    """
    import json
    import sys

    with open(__file__ + ".args", "w") as fh:
        fh.write(" ".join(sys.argv[1:]))

    data = sys.stdin.buffer.read()
    if b"CRASH" in data:
        sys.exit(1)
    if b"GARBAGE" in data:
        sys.stdout.write("this is not json")
        sys.exit(0)

    def span(start, end):
        return {"lCur": {"offset": start}, "rCur": {"offset": end}}

    diagnostics = []
    pos = data.find(b"unused")
    while pos >= 0:
        end = pos + len(b"unused")
        diagnostics.append(
            {
                "sname": "sema-unused-def-let",
                "message": "definition `{}` in let-expression is not used",
                "severity": 2,
                "args": ["unused"],
                "range": span(pos, end),
                "notes": [],
                "fixes": [{"edits": [{"newText": "used", "range": span(pos, end)}]}],
            }
        )
        pos = data.find(b"unused", end)
    json.dump(diagnostics, sys.stdout)
    """
)


@pytest.fixture
def fake_nixf_tidy(tmp_path: Path) -> Path:
    """Write an executable fake nixf-tidy to tmp_path and return its path."""
    if sys.platform == "win32":
        pytest.skip("fake nixf-tidy relies on a POSIX shebang")
    script = tmp_path / "bin" / "nixf-tidy"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{FAKE_NIXF_TIDY}")
    script.chmod(0o755)
    return script


def recorded_args(script: Path) -> str:
    """Return the argv the fake nixf-tidy was last called with."""
    return Path(str(script) + ".args").read_text()


def make_runner(stdout: bytes = b"[]", returncode: int = 0, calls: list | None = None):
    """Return a subprocess.run stand-in that replies with ``stdout`` and ``returncode``."""

    def run(cmd, **kwargs):
        if calls is not None:
            calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=None)

    return run

from __future__ import annotations

"""
Typer CLI entry point for nixf-diagnose.

- Resolves the nixf-tidy executable (flag, NIXF_TIDY_PATH, PATH)
- Expands file and directory arguments into .nix files
- Runs nixf-tidy on every file in parallel
- Prints annotated reports to stderr and exits 1 if anything was reported
"""

import logging
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from typer.core import TyperCommand

from nixf_diagnose import __version__
from nixf_diagnose.config import Config, resolve_nixf_tidy_path
from nixf_diagnose.errors import NixfDiagnoseError
from nixf_diagnose.reporting.console import print_reports
from nixf_diagnose.runner import analyze_files, exit_code_for
from nixf_diagnose.traversal import collect_nix_files

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="CLI wrapper for nixf-tidy with fancy diagnostic output.",
    add_completion=False,
)

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}

FATAL_EXIT_CODE = 2


def parse_bool(value: str) -> bool:
    """Parse a --variable-lookup value."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise typer.BadParameter(f"expected a boolean (true/false), got {value!r}")


VARIABLE_LOOKUP_OPTION = "--variable-lookup"


def expand_optional_values(args: List[str]) -> List[str]:
    """
    Give a bare ``--variable-lookup`` its implicit ``true`` value.

    A following boolean word is taken as the value; anything else (a file,
    another option, nothing) leaves the flag meaning ``true``.
    """
    expanded: List[str] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--":
            expanded.extend(args[i:])
            break
        if arg == VARIABLE_LOOKUP_OPTION:
            nxt = args[i + 1] if i + 1 < len(args) else None
            if nxt is not None and nxt.lower() in TRUE_VALUES | FALSE_VALUES:
                arg = f"{VARIABLE_LOOKUP_OPTION}={nxt}"
                i += 1
            else:
                arg = f"{VARIABLE_LOOKUP_OPTION}=true"
        expanded.append(arg)
        i += 1
    return expanded


class DiagnoseCommand(TyperCommand):
    """Command class that accepts ``--variable-lookup`` with or without a value."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        return super().parse_args(ctx, expand_optional_values(args))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"nixf-diagnose {__version__}")
        raise typer.Exit()


@app.command(cls=DiagnoseCommand)
def diagnose(
    files: List[Path] = typer.Argument(
        None,
        help="Nix files (or directories to search for .nix files) to analyze.",
    ),
    nixf_tidy_path: Optional[str] = typer.Option(
        None,
        "--nixf-tidy-path",
        metavar="PATH",
        help="Path to the nixf-tidy executable.",
    ),
    variable_lookup: str = typer.Option(
        "true",
        "--variable-lookup",
        metavar="[BOOL]",
        help="Enable variable lookup analysis.",
    ),
    ignore: List[str] = typer.Option(
        [],
        "--ignore",
        "-i",
        metavar="ID",
        help="Ignore diagnostics with this id. Can be used multiple times.",
    ),
    only: Optional[str] = typer.Option(
        None,
        "--only",
        "-o",
        metavar="ID",
        help="Only report diagnostics with this id.",
    ),
    auto_fix: bool = typer.Option(
        False,
        "--auto-fix",
        help="Apply the suggested fix of the first fixable diagnostic in each file.",
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of files to analyze in parallel (default: CPU count).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """
    Run nixf-tidy on FILES and print its diagnostics with annotated source.

    Exits with status 1 if any diagnostic is reported, whatever its severity.
    """
    _configure_logging(verbose)

    try:
        tidy_path = resolve_nixf_tidy_path(nixf_tidy_path)
        config = Config(
            nixf_tidy_path=tidy_path,
            variable_lookup=parse_bool(variable_lookup),
            ignore=frozenset(ignore),
            only=only,
            auto_fix=auto_fix,
            jobs=jobs,
        )
        paths = collect_nix_files(files or [])
        reports = analyze_files(config, paths)
    except (NixfDiagnoseError, NotADirectoryError) as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=FATAL_EXIT_CODE)

    print_reports(reports)
    raise typer.Exit(code=exit_code_for(reports))


def main() -> None:
    """Entry point for the `nixf-diagnose` script and `python -m nixf_diagnose.main`."""
    app()


if __name__ == "__main__":
    main()

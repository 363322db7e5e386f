# Rich console output: source-annotated reports with underlined spans on stderr.

from __future__ import annotations

from typing import Optional, Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.text import Text

from nixf_diagnose.findings.models import Label, Report, ReportKind

# Severity → Rich style
SEVERITY_STYLE = {
    ReportKind.ERROR: "bold red",
    ReportKind.WARNING: "bold yellow",
    ReportKind.ADVICE: "bold blue",
}

NOTE_STYLE = "bold cyan"
GUTTER_STYLE = "blue"

PRIMARY_MARKER = "^"
NOTE_MARKER = "-"

TAB = "    "


def line_col(source: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of character ``offset`` in ``source``."""
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def _line_bounds(source: str, offset: int) -> tuple[int, int]:
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end < 0:
        end = len(source)
    return start, end


def _display(text: str) -> str:
    return text.replace("\t", TAB).rstrip("\r")


def _label_style(report: Report, label: Label) -> str:
    if label.primary:
        return SEVERITY_STYLE.get(report.kind, "bold white")
    return NOTE_STYLE


def render_report(report: Report, console: Console) -> None:
    """
    Print one report: a header, its location, then every labelled source line.

    Spans running over several lines are underlined up to the end of their
    first line.
    """
    style = SEVERITY_STYLE.get(report.kind, "bold white")
    source = report.source

    header = Text()
    header.append(report.kind.value, style=style)
    if report.code:
        header.append(f"[{report.code}]", style=style)
    header.append(": ")
    header.append(report.message, style="bold")
    console.print(header, soft_wrap=True, highlight=False)

    line, col = line_col(source, report.offset)
    placed = sorted(
        ((line_col(source, label.start)[0], label) for label in report.labels),
        key=lambda item: (item[0], item[1].start),
    )
    width = len(str(max([n for n, _ in placed] or [line])))
    gutter = " " * width

    console.print(
        Text(f"{gutter}--> ", style=GUTTER_STYLE) + Text(f"{report.path}:{line}:{col}"),
        soft_wrap=True,
        highlight=False,
    )
    console.print(Text(f"{gutter} |", style=GUTTER_STYLE), soft_wrap=True)

    current_line = None
    for line_no, label in placed:
        line_start, line_end = _line_bounds(source, label.start)
        if line_no != current_line:
            current_line = line_no
            console.print(
                Text(f"{line_no:>{width}} | ", style=GUTTER_STYLE)
                + Text(_display(source[line_start:line_end])),
                soft_wrap=True,
                highlight=False,
            )
        indent = cell_len(_display(source[line_start : label.start]))
        span = max(1, cell_len(_display(source[label.start : min(label.end, line_end)])))
        marker = PRIMARY_MARKER if label.primary else NOTE_MARKER
        label_style = _label_style(report, label)
        underline = Text(f"{gutter} | ", style=GUTTER_STYLE)
        underline.append(" " * indent)
        underline.append(marker * span, style=label_style)
        underline.append(f" {label.message}", style=label_style)
        console.print(underline, soft_wrap=True, highlight=False)

    console.print()


def _print_summary(reports: Sequence[Report], console: Console) -> None:
    """Print a one-line count of reports per kind."""
    by_kind: dict[ReportKind, int] = {}
    for r in reports:
        by_kind[r.kind] = by_kind.get(r.kind, 0) + 1

    total = len(reports)
    summary = Text(f"{total} diagnostic{'s' if total != 1 else ''}", style="bold")
    for kind in (ReportKind.ERROR, ReportKind.WARNING, ReportKind.ADVICE):
        if kind in by_kind:
            summary.append(" | ")
            summary.append(f"{by_kind[kind]} {kind.value.lower()}", style=SEVERITY_STYLE[kind])
    console.print(summary, soft_wrap=True, highlight=False)


def print_reports(reports: Sequence[Report], console: Optional[Console] = None) -> None:
    """Render every report to stderr (or ``console``), followed by a summary line."""
    if not reports:
        return
    if console is None:
        console = Console(stderr=True)
    for report in reports:
        render_report(report, console)
    _print_summary(reports, console)

"""
Per-file driver: run nixf-tidy on one file and turn its output into reports.

For each file:
- read the source once (FileContext)
- pipe it to nixf-tidy and capture the JSON envelope on stdout
- decode the envelope, drop filtered rules
- queue the first available fix (auto-fix mode) or build a Report
- write fixed content back when edits were queued

A failing analyzer or unparsable output only costs that file its
diagnostics; a warning names the file and processing moves on.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from nixf_diagnose.config import Config, is_selected
from nixf_diagnose.context import FileContext, create_context
from nixf_diagnose.decoder import decode, report_kind_for
from nixf_diagnose.errors import (
    InvalidSpanError,
    MalformedEnvelopeError,
    MisalignedOffsetError,
    NixfTidyExecutionError,
)
from nixf_diagnose.findings.models import ByteRange, Diagnostic, Label, Report
from nixf_diagnose.fixes import EditCollector, apply_edits, write_fixed
from nixf_diagnose.messages import format_message
from nixf_diagnose.offsets import byte_to_char_offset

logger = logging.getLogger(__name__)

# Same calling convention as subprocess.run; swapped out in tests.
Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


def build_command(config: Config) -> List[str]:
    """Return the nixf-tidy argv for ``config``."""
    cmd = [config.nixf_tidy_path]
    if config.variable_lookup:
        cmd.append("--variable-lookup")
    return cmd


def run_nixf_tidy(
    config: Config,
    data: bytes,
    runner: Runner = subprocess.run,
) -> "subprocess.CompletedProcess[bytes]":
    """
    Feed ``data`` to nixf-tidy on stdin and wait for it to exit.

    stdin is written and stdout drained together, so a large input cannot
    deadlock against a full output pipe. stderr is passed through.

    Raises:
        NixfTidyExecutionError: if the executable cannot be started.
    """
    cmd = build_command(config)
    try:
        return runner(cmd, input=data, stdout=subprocess.PIPE, check=False)
    except OSError as e:
        raise NixfTidyExecutionError(f"Failed to execute nixf-tidy: {e}") from e


def _translate(context: FileContext, span: ByteRange) -> Tuple[int, int]:
    if span.start > span.end:
        raise InvalidSpanError(span.start, span.end)
    return (
        byte_to_char_offset(context.table, span.start),
        byte_to_char_offset(context.table, span.end),
    )


def _string_args(args: list) -> List[str]:
    return [arg for arg in args if isinstance(arg, str)]


def build_report(context: FileContext, diagnostic: Diagnostic) -> Report:
    """
    Build a renderable Report for ``diagnostic`` over ``context``'s source.

    The primary label repeats the formatted message; each note becomes a
    secondary label.

    Raises:
        MisalignedOffsetError: if a span does not fall on character boundaries.
        InvalidSpanError: if a span is inverted.
    """
    message = format_message(diagnostic.message, _string_args(diagnostic.args))
    start, end = _translate(context, diagnostic.range)
    labels = [Label(start=start, end=end, message=message, primary=True)]

    for note in diagnostic.notes:
        note_start, note_end = _translate(context, note.range)
        labels.append(
            Label(
                start=note_start,
                end=note_end,
                message=format_message(note.message, _string_args(note.args)),
            )
        )

    return Report(
        kind=report_kind_for(diagnostic.severity),
        code=diagnostic.sname,
        message=message,
        path=context.path,
        source=context.source,
        labels=labels,
    )


def _check_fix_offsets(context: FileContext, diagnostic: Diagnostic) -> None:
    if diagnostic.fixes:
        for edit in diagnostic.fixes[0].edits:
            _translate(context, edit.range)


def _decode_output(
    path: Path,
    result: "subprocess.CompletedProcess[bytes]",
    require_fixes: bool,
) -> Optional[List[Diagnostic]]:
    if result.returncode != 0:
        logger.warning("nixf-tidy failed on file '%s' (exit status %d)", path, result.returncode)
        return None
    try:
        stdout = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("nixf-tidy output for '%s' is not valid UTF-8: %s", path, e)
        return None
    try:
        return decode(stdout, require_fixes=require_fixes)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON from nixf-tidy output for '%s': %s", path, e)
    except MalformedEnvelopeError as e:
        logger.warning("Unexpected nixf-tidy output for '%s': %s", path, e)
    return None


def process_file(
    config: Config,
    path: Path,
    runner: Runner = subprocess.run,
) -> List[Report]:
    """
    Analyze one file and return its reports.

    In auto-fix mode the first fixable diagnostic is fixed on disk instead of
    being reported.

    Raises:
        SourceReadError: if ``path`` cannot be read.
        NixfTidyExecutionError: if nixf-tidy cannot be started.
    """
    context = create_context(path)
    result = run_nixf_tidy(config, context.data, runner=runner)

    diagnostics = _decode_output(path, result, require_fixes=config.auto_fix)
    if diagnostics is None:
        return []

    collector = EditCollector(path)
    reports: List[Report] = []
    for diagnostic in diagnostics:
        if not is_selected(config, diagnostic.sname):
            continue
        try:
            report = build_report(context, diagnostic)
            if config.auto_fix and not collector:
                _check_fix_offsets(context, diagnostic)
        except (MisalignedOffsetError, InvalidSpanError) as e:
            logger.error("%s: skipping [%s]: %s", path, diagnostic.sname, e)
            continue
        if config.auto_fix and collector.collect(diagnostic) is not None:
            logger.debug("%s: queued fix for [%s]", path, diagnostic.sname)
            continue
        reports.append(report)

    if collector:
        write_fixed(path, apply_edits(context.source, collector.edits))

    logger.debug("%s: %d report(s)", path, len(reports))
    return reports

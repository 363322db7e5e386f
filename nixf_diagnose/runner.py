# Aggregation: run the per-file driver over all inputs in a thread pool and merge results.

from __future__ import annotations

import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence

from nixf_diagnose.config import Config
from nixf_diagnose.findings.models import Report
from nixf_diagnose.tidy import Runner, process_file

logger = logging.getLogger(__name__)


def _worker_count(config: Config, file_count: int) -> int:
    jobs = config.jobs or os.cpu_count() or 1
    return max(1, min(jobs, file_count))


def analyze_files(
    config: Config,
    paths: Sequence[Path],
    runner: Runner = subprocess.run,
) -> List[Report]:
    """
    Run nixf-tidy on every path and return all reports.

    Each file is an independent task returning its own report list; the lists
    are concatenated once every task has finished. Reports are grouped by
    file in input order.

    Raises:
        SourceReadError, NixfTidyExecutionError: from any file; fatal for the run.
    """
    if not paths:
        return []

    workers = _worker_count(config, len(paths))
    logger.debug("Analyzing %d file(s) with %d worker(s)", len(paths), workers)

    if workers == 1:
        per_file = [process_file(config, path, runner=runner) for path in paths]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            per_file = list(executor.map(lambda p: process_file(config, p, runner=runner), paths))

    reports: List[Report] = []
    for file_reports in per_file:
        reports.extend(file_reports)
    return reports


def exit_code_for(reports: Sequence[Report]) -> int:
    """1 if anything was reported, whatever its severity; 0 otherwise."""
    return 1 if reports else 0

from __future__ import annotations

"""
Run configuration: analyzer location, analyzer flags, rule filters and auto-fix.

A Config is built once by the CLI and shared read-only by every worker, so
it is a frozen dataclass. Rule filtering and the nixf-tidy path resolution
chain live here as well since both only depend on configuration.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Sequence

from nixf_diagnose.errors import NixfTidyNotFoundError

logger = logging.getLogger(__name__)

NIXF_TIDY_EXECUTABLE = "nixf-tidy"

# Set by the Nix derivation at build time to pin the analyzer it ships with.
NIXF_TIDY_PATH_ENV = "NIXF_TIDY_PATH"


@dataclass(frozen=True)
class Config:
    """
    Settings for one nixf-diagnose run.

    ``ignore`` and ``only`` hold rule identifiers (the analyzer's ``sname``),
    compared by exact string equality.
    """

    nixf_tidy_path: str = NIXF_TIDY_EXECUTABLE
    variable_lookup: bool = True
    ignore: FrozenSet[str] = field(default_factory=frozenset)
    only: Optional[str] = None
    auto_fix: bool = False
    jobs: Optional[int] = None


def get_default_config() -> Config:
    """Return the configuration used when no CLI options are given."""
    return Config()


def is_selected(config: Config, sname: str) -> bool:
    """
    Return True if diagnostics of rule ``sname`` should be fixed or reported.

    ``--only`` is checked first; the ignore list applies to whatever it lets through.
    """
    if config.only is not None and sname != config.only:
        return False
    if sname in config.ignore:
        return False
    return True


def _from_environment() -> Optional[str]:
    return os.environ.get(NIXF_TIDY_PATH_ENV) or None


def _from_search_path() -> Optional[str]:
    return shutil.which(NIXF_TIDY_EXECUTABLE)


def resolve_nixf_tidy_path(
    explicit: Optional[str] = None,
    lookups: Optional[Sequence[Callable[[], Optional[str]]]] = None,
) -> str:
    """
    Find the nixf-tidy executable; the first lookup that yields a path wins.

    Order: ``explicit`` (from --nixf-tidy-path), then the NIXF_TIDY_PATH
    environment variable, then a search of PATH.

    Raises:
        NixfTidyNotFoundError: if no lookup produced a path.
    """
    if explicit:
        return explicit
    if lookups is None:
        lookups = (_from_environment, _from_search_path)
    for lookup in lookups:
        path = lookup()
        if path:
            logger.debug("Resolved nixf-tidy via %s: %s", lookup.__name__, path)
            return path
    raise NixfTidyNotFoundError(
        "nixf-tidy executable not found in PATH or --nixf-tidy-path not provided"
    )

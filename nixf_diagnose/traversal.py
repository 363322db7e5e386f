"""
Input discovery: expand command-line targets into the Nix files to analyze.

Files given explicitly are analyzed whatever their extension. Directories are
walked recursively for ``*.nix`` files, skipping VCS metadata, direnv caches
and Nix build result links.

Typical usage:
    from pathlib import Path
    from nixf_diagnose.traversal import collect_nix_files

    files = collect_nix_files([Path("flake.nix"), Path("modules")])
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_DIRS: Set[str] = {
    ".git",
    ".hg",
    ".svn",
    ".direnv",
    "result",
    "node_modules",
}


def is_nix_file(path: Path) -> bool:
    """
    Check if a file is a Nix expression (.nix extension).

    Examples:
        >>> is_nix_file(Path("default.nix"))
        True
        >>> is_nix_file(Path("flake.lock"))
        False
    """
    return path.suffix == ".nix"


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Check the directory name (not the full path) against ``ignore_dirs``."""
    return dir_path.name in ignore_dirs


def find_nix_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """
    Recursively find all .nix files under ``root``.

    Args:
        root: Directory to start from.
        ignore_dirs: Directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: Follow symbolic links; off by default since ``result``
                         style links point into the Nix store.

    Returns:
        Paths of all .nix files found, sorted.

    Raises:
        NotADirectoryError: if ``root`` is not a directory.

    Permission errors on subdirectories are logged and the walk continues.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    collected: list[Path] = []
    # real paths of walked directories; stops symlink cycles
    visited: Set[Path] = set()

    def _walk_directory(current_dir: Path) -> None:
        real = current_dir.resolve()
        if real in visited:
            logger.debug("Already visited %s, skipping", current_dir)
            return
        visited.add(real)
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue
                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)
                elif entry.is_file() and is_nix_file(entry):
                    collected.append(entry)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)
    collected.sort()
    logger.debug("Found %d .nix file(s) in %s", len(collected), root)
    return collected


def collect_nix_files(targets: Iterable[Path]) -> list[Path]:
    """
    Resolve CLI targets into a list of files, keeping the given order.

    Directories are expanded with find_nix_files(); anything else is taken
    as a file. Duplicates are dropped.
    """
    files: list[Path] = []
    seen: Set[Path] = set()
    for target in targets:
        if target.is_dir():
            expanded = find_nix_files(target)
            if not expanded:
                logger.warning("No .nix files found under %s", target)
        else:
            expanded = [target]
        for path in expanded:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files

"""
Auto-fix support: pick suggested fixes and apply their edits to the source.

Edits carry byte offsets into the original, unmodified source. They are
applied from the highest start offset down so every edit still sees the
bytes it was computed against.

Only one fix is applied per file per run. That restriction is enforced by
EditCollector alone; apply_edits() works on any set of non-overlapping edits.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from nixf_diagnose.findings.models import Diagnostic, Edit, Fix

logger = logging.getLogger(__name__)


class EditCollector:
    """
    Per-file working set of edits queued for auto-fix.

    collect() queues the first fix of a diagnostic while the working set is
    still empty. Once anything is queued, later diagnostics are left for the
    caller to report as usual.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.edits: List[Edit] = []

    def __bool__(self) -> bool:
        return bool(self.edits)

    def collect(self, diagnostic: Diagnostic) -> Optional[Fix]:
        """Queue ``diagnostic``'s first fix and return it, or None if nothing was queued."""
        if self.edits or not diagnostic.fixes:
            return None
        if len(diagnostic.fixes) > 1:
            logger.warning(
                "%s: [%s] has %d fixes, only the first one is applied",
                self.path,
                diagnostic.sname,
                len(diagnostic.fixes),
            )
        fix = diagnostic.fixes[0]
        if not fix.edits:
            return None
        self.edits.extend(fix.edits)
        return fix


def apply_edits(text: str, edits: Sequence[Edit]) -> str:
    """
    Return ``text`` with every edit applied, highest start offset first.

    Offsets are UTF-8 byte offsets into ``text``. An edit reaching past the
    end of the text, or into a range an already applied edit started at,
    overlaps and is skipped.
    """
    if not edits:
        return text
    data = text.encode("utf-8")
    # bytes below limit are still untouched original bytes
    limit = len(data)
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        if edit.end > limit or edit.start > edit.end:
            logger.debug("Skipping out-of-range edit %d..%d", edit.start, edit.end)
            continue
        data = data[: edit.start] + edit.new_text.encode("utf-8") + data[edit.end :]
        limit = edit.start
    return data.decode("utf-8")


def write_fixed(path: Path, text: str) -> bool:
    """Write fixed content back to ``path``. Failures are logged, not raised."""
    try:
        path.write_bytes(text.encode("utf-8"))
    except OSError as e:
        logger.warning("Failed to write fixes to %s: %s", path, e)
        return False
    logger.info("Applied fixes to %s", path)
    return True

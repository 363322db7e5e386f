# Parse nixf-tidy's JSON envelope into Diagnostic models; severity mapping.

from __future__ import annotations

import json
import logging
from typing import Any, List, Union

from pydantic import ValidationError

from nixf_diagnose.errors import DiagnosticDecodeError, MalformedEnvelopeError
from nixf_diagnose.findings.models import Diagnostic, ReportKind

logger = logging.getLogger(__name__)

# nixf-tidy severity -> rendered kind. 0 is fatal, still shown as an error.
SEVERITY_KINDS: dict[int, ReportKind] = {
    0: ReportKind.ERROR,
    1: ReportKind.ERROR,
    2: ReportKind.WARNING,
    3: ReportKind.ADVICE,
    4: ReportKind.ADVICE,
}

DEFAULT_KIND = ReportKind.ERROR


def report_kind_for(severity: Any) -> ReportKind:
    """Map an analyzer severity to a ReportKind; unknown values are errors."""
    if isinstance(severity, bool) or not isinstance(severity, int):
        return DEFAULT_KIND
    return SEVERITY_KINDS.get(severity, DEFAULT_KIND)


def decode(
    payload: Union[bytes, str, Any],
    *,
    require_fixes: bool = False,
) -> List[Diagnostic]:
    """
    Decode a nixf-tidy JSON envelope into diagnostics, in order.

    Args:
        payload: Raw stdout (bytes or str) or an already-parsed JSON value.
        require_fixes: Treat entries without a ``fixes`` key as malformed
                       (auto-fix mode).

    Returns:
        One Diagnostic per well-formed entry. Malformed entries are skipped.

    Raises:
        MalformedEnvelopeError: if the top-level value is not a list.
        json.JSONDecodeError / UnicodeDecodeError: if raw input is not JSON text.
    """
    if isinstance(payload, (bytes, str)):
        payload = json.loads(payload)

    if not isinstance(payload, list):
        raise MalformedEnvelopeError(
            f"expected a JSON array of diagnostics, got {type(payload).__name__}"
        )

    diagnostics: List[Diagnostic] = []
    for index, entry in enumerate(payload):
        try:
            diagnostics.append(_decode_entry(index, entry, require_fixes))
        except DiagnosticDecodeError as exc:
            logger.debug("Skipping %s", exc)
    return diagnostics


def _decode_entry(index: int, entry: Any, require_fixes: bool) -> Diagnostic:
    if require_fixes and not (isinstance(entry, dict) and "fixes" in entry):
        raise DiagnosticDecodeError(index, "missing 'fixes'")
    try:
        return Diagnostic.model_validate(entry)
    except ValidationError as exc:
        raise DiagnosticDecodeError(index, exc) from exc

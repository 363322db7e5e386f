# Diagnostic message templates: positional "{}" substitution.

from typing import Sequence

PLACEHOLDER = "{}"


def format_message(template: str, args: Sequence[str]) -> str:
    """
    Substitute ``args`` into the ``{}`` placeholders of ``template``, in order.

    Each argument replaces the first placeholder not yet consumed. Surplus
    placeholders are left as-is and surplus arguments are ignored. Text that
    was substituted in is never scanned again.
    """
    parts = []
    pos = 0
    for arg in args:
        idx = template.find(PLACEHOLDER, pos)
        if idx < 0:
            break
        parts.append(template[pos:idx])
        parts.append(arg)
        pos = idx + len(PLACEHOLDER)
    parts.append(template[pos:])
    return "".join(parts)

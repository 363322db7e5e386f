# Exception hierarchy: fatal startup errors, per-file and per-diagnostic failures.

from __future__ import annotations

from pathlib import Path


class NixfDiagnoseError(Exception):
    """Base class for all errors raised by nixf-diagnose."""


class NixfTidyNotFoundError(NixfDiagnoseError):
    """No nixf-tidy executable could be resolved. Fatal."""


class NixfTidyExecutionError(NixfDiagnoseError):
    """The nixf-tidy executable could not be started. Fatal."""


class SourceReadError(NixfDiagnoseError):
    """An input file could not be opened, read or decoded. Fatal."""

    def __init__(self, path: Path, reason: object) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path


class MalformedEnvelopeError(NixfDiagnoseError):
    """The analyzer output is not a JSON array. Fatal for one file only."""


class DiagnosticDecodeError(NixfDiagnoseError):
    """One diagnostic entry is missing required fields; the entry is skipped."""

    def __init__(self, index: int, reason: object) -> None:
        super().__init__(f"diagnostic #{index} is malformed: {reason}")
        self.index = index


class MisalignedOffsetError(NixfDiagnoseError):
    """A byte offset does not fall on a character boundary of the source."""

    def __init__(self, byte_offset: int) -> None:
        super().__init__(f"byte offset {byte_offset} is not a character boundary")
        self.byte_offset = byte_offset


class InvalidSpanError(NixfDiagnoseError):
    """A span whose start lies after its end."""

    def __init__(self, start: int, end: int) -> None:
        super().__init__(f"span {start}..{end} is inverted")
        self.start = start
        self.end = end

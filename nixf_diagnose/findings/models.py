# Pydantic data models: analyzer diagnostics (byte spans) and renderable reports (char spans).

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


def _offset(cursor: Any) -> Any:
    return cursor.get("offset") if isinstance(cursor, dict) else None


class ByteRange(BaseModel):
    """
    Half-open byte range ``[start, end)`` into the original source.

    Parsed from the analyzer shape ``{"lCur": {"offset": n}, "rCur": {"offset": m}}``.
    """

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="before")
    @classmethod
    def _from_cursors(cls, data: Any) -> Any:
        if isinstance(data, dict) and "lCur" in data:
            return {"start": _offset(data.get("lCur")), "end": _offset(data.get("rCur"))}
        return data


class Note(BaseModel):
    """Secondary annotation attached to a diagnostic."""

    message: str
    args: List[Any]
    range: ByteRange


class Edit(BaseModel):
    """Replace the bytes of ``range`` with ``new_text``."""

    range: ByteRange
    new_text: str = Field(..., alias="newText")

    model_config = {"populate_by_name": True}

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end


class Fix(BaseModel):
    """One candidate remediation: an ordered list of edits."""

    edits: List[Edit] = Field(default_factory=list)


class Diagnostic(BaseModel):
    """A single finding emitted by nixf-tidy."""

    sname: str
    message: str
    severity: Any
    args: List[Any]
    range: ByteRange
    notes: List[Note]
    fixes: List[Fix] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def _drop_malformed_notes(cls, value: Any) -> Any:
        """Keep the diagnostic when one of its notes is incomplete; drop just that note."""
        if not isinstance(value, list):
            return value
        notes: List[Note] = []
        for raw in value:
            try:
                notes.append(Note.model_validate(raw))
            except ValidationError as exc:
                logger.debug("Dropping malformed note %r: %s", raw, exc)
        return notes


class ReportKind(str, Enum):
    """Rendered severity of a report."""

    ERROR = "Error"
    WARNING = "Warning"
    ADVICE = "Advice"


class Label(BaseModel):
    """A highlighted character span with its message."""

    start: int = Field(..., ge=0, description="0-based character offset")
    end: int = Field(..., ge=0, description="0-based character offset, exclusive")
    message: str
    primary: bool = False


class Report(BaseModel):
    """A diagnostic ready for display: char-offset labels over the file's source."""

    kind: ReportKind
    code: Optional[str] = None
    message: str
    path: Path
    source: str
    labels: List[Label] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def offset(self) -> int:
        """Character offset the report is anchored at (its primary label)."""
        return self.labels[0].start if self.labels else 0

# Per-file analysis context: file path, raw source bytes, decoded text and offset table.
# The source is read once per run; unreadable or non-UTF-8 files are fatal.

import logging
from pathlib import Path

from nixf_diagnose.errors import SourceReadError
from nixf_diagnose.offsets import ByteToCharTable, build_char_byte_table

logger = logging.getLogger(__name__)


class FileContext:
    """
    Per-file state for one analysis pass.

    ``data`` is exactly what nixf-tidy receives on stdin; ``source`` is its
    UTF-8 decoding and ``table`` maps byte offsets in ``data`` to character
    offsets in ``source``.
    """

    def __init__(self, path: Path, data: bytes, source: str) -> None:
        self.path = path
        self.data = data
        self.source = source
        self.table: ByteToCharTable = build_char_byte_table(source)

    @classmethod
    def from_text(cls, path: Path, source: str) -> "FileContext":
        """Build a context from already-decoded text."""
        return cls(path, source.encode("utf-8"), source)


def create_context(path: Path) -> FileContext:
    """
    Read ``path`` and build its FileContext.

    Raises:
        SourceReadError: if the file cannot be read or is not valid UTF-8.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise SourceReadError(path, e) from e
    try:
        source = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceReadError(path, e) from e

    logger.debug("Read %s: %d bytes, %d characters", path, len(data), len(source))
    return FileContext(path, data, source)

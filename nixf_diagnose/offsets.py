"""
Byte-to-character offset translation.

nixf-tidy reports positions as UTF-8 byte offsets, while reports are laid out
on characters. A ByteToCharTable records the byte offset at which every
character of the source starts, so a byte offset can be mapped back to a
character index with an exact-match binary search.

Typical usage:
    table = build_char_byte_table(source)
    start = byte_to_char_offset(table, diagnostic.range.start)
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterator, List

from nixf_diagnose.errors import MisalignedOffsetError


class ByteToCharTable:
    """
    Ordered byte offsets, one per character of a source text.

    ``table[i]`` is the byte offset at which character ``i`` begins, and
    ``len(table)`` is the character count. ``byte_length`` is the encoded
    size of the whole text; it is a valid span end but not a character start.
    """

    def __init__(self, offsets: List[int], byte_length: int) -> None:
        self.offsets = offsets
        self.byte_length = byte_length

    def __len__(self) -> int:
        return len(self.offsets)

    def __getitem__(self, index: int) -> int:
        return self.offsets[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.offsets)


def build_char_byte_table(text: str) -> ByteToCharTable:
    """Walk ``text`` once, recording the running UTF-8 byte offset before each character."""
    offsets: List[int] = []
    byte_pos = 0
    for char in text:
        offsets.append(byte_pos)
        byte_pos += len(char.encode("utf-8"))
    return ByteToCharTable(offsets, byte_pos)


def byte_to_char_offset(table: ByteToCharTable, byte_offset: int) -> int:
    """
    Return the index of the character starting exactly at ``byte_offset``.

    The end of the text maps to the character count so half-open spans that
    reach EOF translate cleanly.

    Raises:
        MisalignedOffsetError: if no character begins at ``byte_offset``.
    """
    if byte_offset == table.byte_length:
        return len(table)
    index = bisect_left(table.offsets, byte_offset)
    if index < len(table) and table.offsets[index] == byte_offset:
        return index
    raise MisalignedOffsetError(byte_offset)

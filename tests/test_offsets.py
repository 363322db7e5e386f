"""Tests for byte-to-character offset translation."""

import pytest

from nixf_diagnose.errors import MisalignedOffsetError
from nixf_diagnose.offsets import build_char_byte_table, byte_to_char_offset


def test_ascii_table_is_identity():
    text = "let x = 1; in x\n"
    table = build_char_byte_table(text)
    assert len(table) == len(text)
    assert all(table[i] == i for i in range(len(text)))


def test_empty_text():
    table = build_char_byte_table("")
    assert len(table) == 0
    assert byte_to_char_offset(table, 0) == 0


def test_multibyte_table_records_char_starts():
    # "é" is 2 bytes, "€" is 3 bytes, "𝄞" is 4 bytes
    table = build_char_byte_table("aé€𝄞b")
    assert list(table) == [0, 1, 3, 6, 10]
    assert table.byte_length == 11


def test_translate_every_char_boundary():
    text = "\"ü\" + \"日本\" # 🎉"
    table = build_char_byte_table(text)
    data = text.encode("utf-8")
    for index in range(len(text)):
        byte_offset = len(text[:index].encode("utf-8"))
        assert byte_to_char_offset(table, byte_offset) == index
    assert byte_to_char_offset(table, len(data)) == len(text)


def test_translate_mid_character_fails():
    table = build_char_byte_table("a日b")
    # 日 occupies bytes 1..4
    with pytest.raises(MisalignedOffsetError) as excinfo:
        byte_to_char_offset(table, 2)
    assert excinfo.value.byte_offset == 2
    with pytest.raises(MisalignedOffsetError):
        byte_to_char_offset(table, 3)


def test_translate_past_end_fails():
    table = build_char_byte_table("abc")
    with pytest.raises(MisalignedOffsetError):
        byte_to_char_offset(table, 4)

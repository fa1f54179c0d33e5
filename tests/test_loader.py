"""Tests for the hexadecimal program loader."""

import io

import pytest
from vole.loader import load_words, parse_word, iter_tokens, MAX_INSTRUCTIONS
from vole.memory import Memory
from vole.errors import StreamReadFailed, TooManyInstructions


class TestParseWord:
    """Token parsing."""

    def test_four_digits(self):
        assert parse_word("20A4") == 0x20A4

    def test_lowercase(self):
        assert parse_word("c000") == 0xC000

    def test_short_token(self):
        """Fewer than four digits are zero-extended."""
        assert parse_word("FF") == 0x00FF

    def test_prefixed(self):
        assert parse_word("0x1003") == 0x1003

    @pytest.mark.parametrize("token", ["XYZ", "12345", "0x", "12G4", "-100"])
    def test_invalid_tokens(self, token):
        with pytest.raises(StreamReadFailed) as exc_info:
            parse_word(token)
        assert exc_info.value.token == token


class TestTokens:
    """Token splitting."""

    def test_mixed_whitespace(self):
        stream = io.StringIO("1003 C000\n\t2101\n\n  B004  \n")
        assert list(iter_tokens(stream)) == ["1003", "C000", "2101", "B004"]

    def test_empty_stream(self):
        assert list(iter_tokens(io.StringIO(""))) == []

    def test_byte_stream(self):
        """Byte streams are decoded before splitting."""
        stream = io.BytesIO(b"1003 C000\r\n2101\n")
        assert list(iter_tokens(stream)) == ["1003", "C000", "2101"]


class TestLoadWords:
    """Loading into memory."""

    def test_high_byte_first(self):
        """Each word becomes two cells, high byte first."""
        mem = Memory()
        count = load_words(mem, io.StringIO("1003\nC000\n"))
        assert count == 2
        assert mem.snapshot()[:4] == [0x10, 0x03, 0xC0, 0x00]

    def test_byte_stream(self):
        mem = Memory()
        assert load_words(mem, io.BytesIO(b"1003 C000")) == 2
        assert mem.snapshot()[:4] == [0x10, 0x03, 0xC0, 0x00]

    def test_non_ascii_bytes_fail_cleanly(self):
        mem = Memory()
        with pytest.raises(StreamReadFailed):
            load_words(mem, io.BytesIO(b"1003 \xff\xfe"))
        assert mem[0] == 0x10

    def test_word_at_last_cell_wraps(self):
        """A word loaded at FF puts its low byte in cell 00."""
        mem = Memory()
        assert load_words(mem, io.StringIO("21AB"), at=0xFF) == 1
        assert mem[0xFF] == 0x21
        assert mem[0x00] == 0xAB

    def test_second_word_after_last_cell_does_not_fit(self):
        mem = Memory()
        with pytest.raises(TooManyInstructions):
            load_words(mem, io.StringIO("21AB 2200"), at=0xFF)
        assert mem[0x00] == 0xAB

    def test_start_address(self):
        mem = Memory()
        load_words(mem, io.StringIO("2A2B"), at=0x40)
        assert mem[0x40] == 0x2A
        assert mem[0x41] == 0x2B
        assert mem[0x00] == 0

    def test_full_memory(self):
        """Exactly 128 instructions fit."""
        mem = Memory()
        program = " ".join(["1111"] * MAX_INSTRUCTIONS)
        assert load_words(mem, io.StringIO(program)) == 128
        assert mem.snapshot() == [0x11] * 256

    def test_too_many_instructions_keeps_partial_load(self):
        """129 words fail, but the first 128 remain in memory."""
        mem = Memory()
        tokens = [f"{i:04X}" for i in range(129)]
        with pytest.raises(TooManyInstructions):
            load_words(mem, io.StringIO("\n".join(tokens)))
        for i in range(128):
            assert mem[2 * i] == 0
            assert mem[2 * i + 1] == i

    def test_too_many_from_offset(self):
        """Capacity counts from the start address."""
        mem = Memory()
        with pytest.raises(TooManyInstructions):
            load_words(mem, io.StringIO("1111 2222 3333"), at=0xFC)
        assert mem[0xFC] == 0x11
        assert mem[0xFE] == 0x22

    def test_bad_token_keeps_partial_load(self):
        """Words before a bad token are not rolled back."""
        mem = Memory()
        with pytest.raises(StreamReadFailed) as exc_info:
            load_words(mem, io.StringIO("1003 C000 nope 2222"))
        assert exc_info.value.addr == 4
        assert mem.snapshot()[:6] == [0x10, 0x03, 0xC0, 0x00, 0, 0]

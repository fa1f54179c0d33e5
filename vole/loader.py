"""Program loader for hexadecimal Vole program text."""

import logging as lg
import re
from typing import BinaryIO, Iterator, TextIO, Union

from .errors import StreamReadFailed, TooManyInstructions
from .memory import BYTE_MASK, MEMORY_SIZE, Memory

MAX_INSTRUCTIONS = MEMORY_SIZE // 2

_HEX_WORD_RE = re.compile(r"^(?:0[xX])?([0-9A-Fa-f]{1,4})$")


ProgramStream = Union[TextIO, BinaryIO]


def iter_tokens(stream: ProgramStream) -> Iterator[str]:
    """Yield whitespace-separated tokens until end of input."""
    for line in stream:
        if isinstance(line, bytes):
            line = line.decode("ascii", "replace")
        yield from line.split()


def parse_word(token: str, addr: int = 0) -> int:
    """Parse one token as a 16-bit hexadecimal instruction word."""
    match = _HEX_WORD_RE.fullmatch(token)
    if match is None:
        raise StreamReadFailed(
            f"Not a hexadecimal instruction: {token!r}",
            addr=addr,
            token=token,
        )
    return int(match.group(1), 16)


def load_words(mem: Memory, stream: ProgramStream, at: int = 0) -> int:
    """Write each instruction word from ``stream`` into ``mem`` starting at ``at``.

    Words are stored high byte first. A word starting at FF puts its low
    byte in cell 00, matching how instructions are fetched. Cells written
    before a failure are left in place.

    Returns:
        Number of instructions written
    """
    addr = at
    count = 0
    for token in iter_tokens(stream):
        if addr >= MEMORY_SIZE:
            lg.warning("Program too big (>{0} instructions)".format(MAX_INSTRUCTIONS))
            raise TooManyInstructions(
                f"Program does not fit in memory starting at {at:02X} "
                f"(at most {MAX_INSTRUCTIONS} instructions)",
                addr=addr,
                token=token,
            )
        try:
            word = parse_word(token, addr)
        except StreamReadFailed:
            lg.warning("Loading program failed at {0:02X}: {1!r}".format(addr, token))
            raise
        mem[addr] = word >> 8
        mem[(addr + 1) & BYTE_MASK] = word & 0xFF
        addr += 2
        count += 1
    return count

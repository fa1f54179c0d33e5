"""Output sinks driven by a STORE to memory cell 00."""

from typing import Optional, Protocol


class Screen(Protocol):
    """Anything that can show a byte and be cleared."""

    def write(self, code: int) -> None:
        ...

    def clear(self) -> None:
        ...


class NullScreen:
    """Screen that discards all output."""

    def write(self, code: int) -> None:
        pass

    def clear(self) -> None:
        pass


class BufferScreen:
    """Screen that accumulates characters in memory."""

    def __init__(self):
        self._output: list[str] = []
        self.last_out_code: Optional[int] = None
        self.clear_count = 0

    def write(self, code: int) -> None:
        """Append character to output buffer."""
        self.last_out_code = code & 0xFF
        self._output.append(chr(self.last_out_code))

    def clear(self) -> None:
        """Drop everything written so far."""
        self._output = []
        self.clear_count += 1

    def get_output(self) -> str:
        """Get accumulated output as string."""
        return "".join(self._output)

    def reset_io_codes(self) -> None:
        """Reset last output code for a new instruction."""
        self.last_out_code = None

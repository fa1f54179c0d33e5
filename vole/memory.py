"""Memory model for the Vole machine."""

from .errors import MemoryAccessError

MEMORY_SIZE = 256
BYTE_MASK = 0xFF


class Memory:
    """Fixed 256-cell byte memory."""

    def __init__(self):
        self.size = MEMORY_SIZE
        self._data: list[int] = [0] * MEMORY_SIZE

    def _check_bounds(self, addr: int) -> None:
        """Check if address is within valid range."""
        if addr < 0 or addr >= self.size:
            raise MemoryAccessError(f"Memory address out of range: {addr}", addr=addr)

    def read(self, addr: int) -> int:
        """Read byte from memory address."""
        self._check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write byte to memory address, keeping the low 8 bits."""
        self._check_bounds(addr)
        self._data[addr] = value & BYTE_MASK

    def __getitem__(self, addr: int) -> int:
        return self.read(addr)

    def __setitem__(self, addr: int, value: int) -> None:
        self.write(addr, value)

    def __len__(self) -> int:
        return self.size

    def reset(self) -> None:
        """Zero every cell."""
        self._data = [0] * self.size

    def get_watched(self, addresses: list[int]) -> dict[str, int]:
        """Get values at watched addresses as string-keyed dict."""
        result = {}
        for addr in addresses:
            if 0 <= addr < self.size:
                result[str(addr)] = self._data[addr]
        return result

    def snapshot(self) -> list[int]:
        """Return a copy of the entire memory."""
        return self._data.copy()

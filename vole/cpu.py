"""Register file for the Vole machine."""

from .errors import RegisterAccessError
from .memory import BYTE_MASK

REGISTER_COUNT = 16


class Registers:
    """Sixteen general-purpose byte registers plus the program counter."""

    def __init__(self):
        self._data: list[int] = [0] * REGISTER_COUNT
        self._pc: int = 0

    @property
    def pc(self) -> int:
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & BYTE_MASK

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= REGISTER_COUNT:
            raise RegisterAccessError(f"Register index out of range: {index}")

    def __getitem__(self, index: int) -> int:
        self._check_index(index)
        return self._data[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._check_index(index)
        self._data[index] = value & BYTE_MASK

    def __len__(self) -> int:
        return REGISTER_COUNT

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        state = {f"r{i}": value for i, value in enumerate(self._data)}
        state["pc"] = self._pc
        return state

    def snapshot(self) -> list[int]:
        """Return a copy of the general registers."""
        return self._data.copy()

    def reset(self) -> None:
        """Zero all registers, including the program counter."""
        self._data = [0] * REGISTER_COUNT
        self._pc = 0

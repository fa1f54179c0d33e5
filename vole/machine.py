"""The Vole machine: memory, registers and the fetch-decode-execute loop."""

import enum
import logging as lg
import os
from typing import Iterator, Optional, Sequence, Union

from .cpu import Registers
from .errors import FileOpenFailed
from .instructions import (
    DEFAULT_OPCODE_TABLE,
    INSTRUCTION_WIDTH,
    Behavior,
    Opcode,
    decode,
    validate_table,
)
from .loader import ProgramStream, load_words
from .memory import MEMORY_SIZE, Memory
from .screen import NullScreen, Screen


class MachineState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    HALTED = "halted"


class Machine:
    """Single Vole processor.

    ``mem`` and ``reg`` are public so front ends can inspect and edit cells
    directly between steps.
    """

    def __init__(
        self,
        screen: Optional[Screen] = None,
        opcode_table: Optional[Sequence[Opcode]] = None,
    ):
        self.mem = Memory()
        self.reg = Registers()
        self.screen: Screen = screen if screen is not None else NullScreen()
        self.opcode_table = validate_table(
            opcode_table if opcode_table is not None else DEFAULT_OPCODE_TABLE
        )
        self._started = False
        self._halted_pc: Optional[int] = None

    @property
    def state(self) -> MachineState:
        if self._halted_pc is not None:
            # Moving the PC away from the halt point makes the machine runnable again
            if self.reg.pc == self._halted_pc:
                return MachineState.HALTED
            return MachineState.IDLE
        return MachineState.RUNNING if self._started else MachineState.IDLE

    @property
    def halted(self) -> bool:
        return self.state is MachineState.HALTED

    def load_program(self, stream: ProgramStream, at: int = 0) -> int:
        """Load hexadecimal instruction words from a text or byte stream into memory at ``at``.

        Returns:
            Number of instructions loaded
        """
        count = load_words(self.mem, stream, at)
        lg.info("Loaded {0} instructions at {1:02X}".format(count, at))
        return count

    def load_program_file(self, path: Union[str, os.PathLike], at: int = 0) -> int:
        """Open ``path`` and load its program text into memory at ``at``."""
        try:
            stream = open(path, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            lg.warning("Cannot open program file {0}: {1}".format(path, e))
            raise FileOpenFailed(f"Cannot open program file: {path}") from e
        with stream:
            return self.load_program(stream, at)

    def reset(self) -> None:
        """Zero all registers, the PC and every memory cell."""
        self.reg.reset()
        self.mem.reset()
        self._started = False
        self._halted_pc = None

    def fetch(self) -> Behavior:
        """Decode the instruction at the PC and move the PC past it."""
        behavior = decode(self, self.reg.pc)
        self.reg.pc = self.reg.pc + INSTRUCTION_WIDTH
        return behavior

    def step(self) -> bool:
        """Execute one instruction.

        Returns:
            True if the instruction signalled halt
        """
        self._started = True
        self._halted_pc = None
        behavior = self.fetch()
        if lg.getLogger().isEnabledFor(lg.DEBUG):
            lg.debug("PC:{0:02X} IR:{1:04X} [{2}]".format(
                behavior.instruction.addr, behavior.instruction.word, behavior.describe()
            ))
        should_halt = behavior.execute()
        if should_halt:
            self._halted_pc = self.reg.pc
            lg.info("Halted after instruction at {0:02X}".format(behavior.instruction.addr))
        return should_halt

    def run(self) -> int:
        """Step until an instruction signals halt.

        There is no step limit; callers that need one drive ``step`` themselves.

        Returns:
            Number of instructions executed
        """
        steps = 1
        while not self.step():
            steps += 1
        return steps

    def disassemble(self, start: int = 0, end: int = MEMORY_SIZE) -> Iterator[tuple[int, int, str]]:
        """Yield ``(addr, word, description)`` for each instruction slot in range."""
        for addr in range(start, min(end, MEMORY_SIZE), INSTRUCTION_WIDTH):
            behavior = decode(self, addr)
            yield addr, behavior.instruction.word, behavior.describe()

    def get_state(self) -> dict:
        """Registers, PC and execution state as a dictionary."""
        state = self.reg.get_state()
        state["state"] = self.state.value
        return state

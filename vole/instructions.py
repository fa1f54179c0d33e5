"""Instruction decoding and execution for the Vole machine."""

import logging as lg
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from . import mini_float
from .memory import BYTE_MASK, Memory

if TYPE_CHECKING:
    from .machine import Machine


INSTRUCTION_WIDTH = 2
OPCODE_COUNT = 16
SCREEN_ADDRESS = 0x00

# Executor results
HALT = True
CONTINUE = False


@dataclass(frozen=True)
class Instruction:
    """16-bit instruction word fetched from two consecutive cells."""
    addr: int
    word: int

    @classmethod
    def fetch(cls, mem: Memory, addr: int) -> "Instruction":
        high = mem[addr & BYTE_MASK]
        low = mem[(addr + 1) & BYTE_MASK]
        return cls(addr=addr & BYTE_MASK, word=(high << 8) | low)

    @property
    def opcode(self) -> int:
        return (self.word >> 12) & 0xF

    @property
    def operand1(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def operand2(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def operand3(self) -> int:
        return self.word & 0xF

    @property
    def operand_xy(self) -> int:
        return self.word & 0xFF


# Instruction executor type: returns HALT or CONTINUE
InstructionExecutor = Callable[[Instruction, "Machine"], bool]
InstructionDescriber = Callable[[Instruction], str]


@dataclass(frozen=True)
class Opcode:
    """One slot of the dispatch table."""
    name: str
    execute: InstructionExecutor
    describe: InstructionDescriber


def execute_nothing(instr: Instruction, mac: "Machine") -> bool:
    """0000: no effect"""
    return CONTINUE


def execute_load1(instr: Instruction, mac: "Machine") -> bool:
    """1RXY: R := MEM[XY]"""
    mac.reg[instr.operand1] = mac.mem[instr.operand_xy]
    return CONTINUE


def execute_load2(instr: Instruction, mac: "Machine") -> bool:
    """2RXY: R := XY"""
    mac.reg[instr.operand1] = instr.operand_xy
    return CONTINUE


def execute_store(instr: Instruction, mac: "Machine") -> bool:
    """3RXY: MEM[XY] := R, writing 00 also drives the screen"""
    value = mac.reg[instr.operand1]
    mac.mem[instr.operand_xy] = value
    if instr.operand_xy == SCREEN_ADDRESS:
        if value:
            mac.screen.write(value)
        else:
            mac.screen.clear()
    return CONTINUE


def execute_move(instr: Instruction, mac: "Machine") -> bool:
    """40RS: S := R"""
    mac.reg[instr.operand3] = mac.reg[instr.operand2]
    return CONTINUE


def execute_add1(instr: Instruction, mac: "Machine") -> bool:
    """5RST: R := S + T (two's complement, wraps)"""
    total = mac.reg[instr.operand2] + mac.reg[instr.operand3]
    mac.reg[instr.operand1] = total & BYTE_MASK
    return CONTINUE


def execute_add2(instr: Instruction, mac: "Machine") -> bool:
    """6RST: R := S + T (mini-float)"""
    total = mini_float.decode(mac.reg[instr.operand2]) + mini_float.decode(mac.reg[instr.operand3])
    mac.reg[instr.operand1] = mini_float.encode(total)
    return CONTINUE


def execute_or(instr: Instruction, mac: "Machine") -> bool:
    """7RST: R := S OR T"""
    mac.reg[instr.operand1] = mac.reg[instr.operand2] | mac.reg[instr.operand3]
    return CONTINUE


def execute_and(instr: Instruction, mac: "Machine") -> bool:
    """8RST: R := S AND T"""
    mac.reg[instr.operand1] = mac.reg[instr.operand2] & mac.reg[instr.operand3]
    return CONTINUE


def execute_xor(instr: Instruction, mac: "Machine") -> bool:
    """9RST: R := S XOR T"""
    mac.reg[instr.operand1] = mac.reg[instr.operand2] ^ mac.reg[instr.operand3]
    return CONTINUE


def execute_rotate(instr: Instruction, mac: "Machine") -> bool:
    """AR0X: rotate R right X times"""
    amount = instr.operand3 % 8
    value = mac.reg[instr.operand1]
    mac.reg[instr.operand1] = ((value >> amount) | (value << (8 - amount))) & BYTE_MASK
    return CONTINUE


def execute_jump(instr: Instruction, mac: "Machine") -> bool:
    """BRXY: if R == R0, PC := XY (rounded down to an even address)"""
    if mac.reg[instr.operand1] == mac.reg[0]:
        mac.reg.pc = instr.operand_xy & 0xFE
    return CONTINUE


def execute_halt(instr: Instruction, mac: "Machine") -> bool:
    """C000: halt execution"""
    return HALT


def execute_unused(instr: Instruction, mac: "Machine") -> bool:
    """Reserved opcodes stop the machine."""
    lg.warning("Opcode {0:X} at {1:02X} is not in use, halting".format(instr.opcode, instr.addr))
    return HALT


def _binary_op_text(verb: str, instr: Instruction, how: str = "") -> str:
    return "{0} R{1:X} and R{2:X}{3} into R{4:X}".format(
        verb, instr.operand2, instr.operand3, how, instr.operand1
    )


def describe_store(instr: Instruction) -> str:
    text = "Store the bit pattern in R{0:X} to memory cell {1:02X}".format(
        instr.operand1, instr.operand_xy
    )
    if instr.operand_xy == SCREEN_ADDRESS:
        text += " (screen)"
    return text


# Dispatch table, indexed by opcode nibble
DEFAULT_OPCODE_TABLE: tuple[Opcode, ...] = (
    Opcode("NOTHING", execute_nothing, lambda i: "Do nothing"),
    Opcode(
        "LOAD1",
        execute_load1,
        lambda i: "Load R{0:X} with the bit pattern in memory cell {1:02X}".format(
            i.operand1, i.operand_xy
        ),
    ),
    Opcode(
        "LOAD2",
        execute_load2,
        lambda i: "Load R{0:X} with the bit pattern {1:02X}".format(i.operand1, i.operand_xy),
    ),
    Opcode("STORE", execute_store, describe_store),
    Opcode(
        "MOVE",
        execute_move,
        lambda i: "Copy the bit pattern in R{0:X} to R{1:X}".format(i.operand2, i.operand3),
    ),
    Opcode("ADD1", execute_add1, lambda i: _binary_op_text("Add", i, " as integers")),
    Opcode("ADD2", execute_add2, lambda i: _binary_op_text("Add", i, " as floats")),
    Opcode("OR", execute_or, lambda i: _binary_op_text("OR", i)),
    Opcode("AND", execute_and, lambda i: _binary_op_text("AND", i)),
    Opcode("XOR", execute_xor, lambda i: _binary_op_text("XOR", i)),
    Opcode(
        "ROTATE",
        execute_rotate,
        lambda i: "Rotate R{0:X} right by {1} bits".format(i.operand1, i.operand3 % 8),
    ),
    Opcode(
        "JUMP",
        execute_jump,
        lambda i: "Jump to {0:02X} if R{1:X} equals R0".format(i.operand_xy & 0xFE, i.operand1),
    ),
    Opcode("HALT", execute_halt, lambda i: "Halt execution"),
    Opcode("UNUSED", execute_unused, lambda i: "Unused opcode {0:X}".format(i.opcode)),
    Opcode("UNUSED", execute_unused, lambda i: "Unused opcode {0:X}".format(i.opcode)),
    Opcode("UNUSED", execute_unused, lambda i: "Unused opcode {0:X}".format(i.opcode)),
)


def validate_table(table: Sequence[Opcode]) -> tuple[Opcode, ...]:
    """Return the table as a tuple, checking it covers every opcode."""
    table = tuple(table)
    if len(table) != OPCODE_COUNT:
        raise ValueError(f"Opcode table needs {OPCODE_COUNT} entries, got {len(table)}")
    return table


def extend_table(table: Sequence[Opcode], opcode_number: int, opcode: Opcode) -> tuple[Opcode, ...]:
    """Return a copy of ``table`` with one slot replaced."""
    if not 0 <= opcode_number < OPCODE_COUNT:
        raise ValueError(f"Opcode number out of range: {opcode_number}")
    entries = list(validate_table(table))
    entries[opcode_number] = opcode
    return tuple(entries)


@dataclass(frozen=True)
class Behavior:
    """A decoded instruction bound to the machine that will execute it."""
    opcode: Opcode
    instruction: Instruction
    machine: "Machine"

    @property
    def name(self) -> str:
        return self.opcode.name

    def execute(self) -> bool:
        """Run the instruction, returning HALT or CONTINUE."""
        return self.opcode.execute(self.instruction, self.machine)

    def describe(self) -> str:
        return self.opcode.describe(self.instruction)


def decode(mac: "Machine", addr: int) -> Behavior:
    """Decode the instruction at ``addr`` without touching the PC."""
    instr = Instruction.fetch(mac.mem, addr)
    return Behavior(
        opcode=mac.opcode_table[instr.opcode],
        instruction=instr,
        machine=mac,
    )

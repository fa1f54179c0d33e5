"""Program runner with tracing for the Vole machine."""

import io
from dataclasses import dataclass, field
from typing import Optional
from .instructions import decode
from .machine import Machine
from .screen import BufferScreen
from .errors import (
    VoleError,
    StepLimitExceeded,
    ErrorInfo,
)


@dataclass
class RunOptions:
    """Options for program execution."""
    start_address: int = 0
    max_steps: int = 10000
    trace: bool = True
    trace_watch: list[int] = field(default_factory=list)
    initial_memory: dict[int, int] = field(default_factory=dict)
    initial_registers: dict[int, int] = field(default_factory=dict)


@dataclass
class TraceRow:
    """Single row of execution trace."""
    step: int
    addr: int
    word: int
    registers: list[int]
    pc: int
    mem: dict[str, int]
    out_code: Optional[int] = None
    instr_text: str = ""

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "addr": self.addr,
            "word": self.word,
            "registers": self.registers,
            "pc": self.pc,
            "mem": self.mem,
            "out_code": self.out_code,
            "instr_text": self.instr_text,
        }


@dataclass
class RunResult:
    """Result of program execution."""
    status: str  # "ok" | "error"
    output_text: str
    steps_executed: int
    final_state: dict
    memory: list[int]
    trace_watch: list[int]
    trace: list[dict]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "output_text": self.output_text,
            "steps_executed": self.steps_executed,
            "final_state": self.final_state,
            "memory": self.memory,
            "trace_watch": self.trace_watch,
            "trace": self.trace,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_program(
    program_text: str,
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Load and run a Vole program.

    Args:
        program_text: Whitespace-separated hexadecimal instruction words
        options: Execution options

    Returns:
        RunResult with execution status, screen output, and trace
    """
    if options is None:
        options = RunOptions()

    trace_rows: list[dict] = []
    error_info: Optional[ErrorInfo] = None
    steps_executed = 0

    screen = BufferScreen()
    mac = Machine(screen=screen)
    watch = sorted(set(options.trace_watch))

    try:
        for addr, val in options.initial_memory.items():
            mac.mem[addr] = val
        for index, val in options.initial_registers.items():
            mac.reg[index] = val
        mac.load_program(io.StringIO(program_text), at=options.start_address)
    except VoleError as e:
        return RunResult(
            status="error",
            output_text="",
            steps_executed=0,
            final_state=mac.get_state(),
            memory=mac.mem.snapshot(),
            trace_watch=watch,
            trace=[],
            error=e.to_error_info(),
        )

    mac.reg.pc = options.start_address
    instr_addr = mac.reg.pc

    try:
        halted = False
        while not halted and steps_executed < options.max_steps:
            instr_addr = mac.reg.pc
            screen.reset_io_codes()
            behavior = decode(mac, instr_addr)
            halted = mac.step()
            steps_executed += 1

            if options.trace:
                row = TraceRow(
                    step=steps_executed,
                    addr=instr_addr,
                    word=behavior.instruction.word,
                    registers=mac.reg.snapshot(),
                    pc=mac.reg.pc,
                    mem=mac.mem.get_watched(watch),
                    out_code=screen.last_out_code,
                    instr_text=behavior.describe(),
                )
                trace_rows.append(row.to_dict())

        if not halted:
            raise StepLimitExceeded(
                f"Step limit exceeded: {options.max_steps}",
                step=steps_executed,
                addr=mac.reg.pc,
            )

    except VoleError as e:
        e.step = steps_executed
        e.addr = instr_addr
        error_info = e.to_error_info()

    return RunResult(
        status="ok" if error_info is None else "error",
        output_text=screen.get_output(),
        steps_executed=steps_executed,
        final_state=mac.get_state(),
        memory=mac.mem.snapshot(),
        trace_watch=watch,
        trace=trace_rows,
        error=error_info,
    )

"""Vole Machine Simulator Core Package."""

from .machine import Machine, MachineState
from .runner import run_program, RunOptions, RunResult
from .screen import BufferScreen, NullScreen, Screen
from .errors import (
    VoleError,
    LoadError,
    FileOpenFailed,
    StreamReadFailed,
    TooManyInstructions,
    VoleRuntimeError,
)

__all__ = [
    "Machine",
    "MachineState",
    "run_program",
    "RunOptions",
    "RunResult",
    "BufferScreen",
    "NullScreen",
    "Screen",
    "VoleError",
    "LoadError",
    "FileOpenFailed",
    "StreamReadFailed",
    "TooManyInstructions",
    "VoleRuntimeError",
]

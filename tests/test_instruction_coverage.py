"""Ensure every opcode has a dedicated behavioral test."""

from __future__ import annotations

from dataclasses import dataclass, field
import copy
from typing import Callable

import pytest

from vole import run_program, RunOptions
from vole.instructions import DEFAULT_OPCODE_TABLE


def expect_reg(index: int, value: int) -> Callable:
    def _check(result):
        assert result.final_state[f"r{index}"] == value

    return _check


def expect_pc(value: int) -> Callable:
    def _check(result):
        assert result.final_state["pc"] == value

    return _check


def expect_mem(addr: int, value: int) -> Callable:
    def _check(result):
        assert result.memory[addr] == value

    return _check


def expect_output(text: str) -> Callable:
    def _check(result):
        assert result.output_text == text

    return _check


def expect_steps(count: int) -> Callable:
    def _check(result):
        assert result.steps_executed == count

    return _check


@dataclass
class InstructionCase:
    opcode: str
    program: str
    checker: Callable
    options_kwargs: dict = field(default_factory=dict)


INSTRUCTION_CASES = [
    InstructionCase("NOTHING", "0000 C000", expect_steps(2)),
    InstructionCase(
        "LOAD1",
        "1380 C000",
        expect_reg(3, 0x12),
        options_kwargs={"initial_memory": {0x80: 0x12}},
    ),
    InstructionCase("LOAD2", "24A7 C000", expect_reg(4, 0xA7)),
    InstructionCase("STORE", "2599 3580 C000", expect_mem(0x80, 0x99)),
    InstructionCase("MOVE", "2B3C 40B2 C000", expect_reg(2, 0x3C)),
    InstructionCase("ADD1", "21FF 2202 5312 C000", expect_reg(3, 0x01)),
    InstructionCase("ADD2", "2148 2248 6312 C000", expect_reg(3, 0x58)),
    InstructionCase("OR", "21F0 220F 7312 C000", expect_reg(3, 0xFF)),
    InstructionCase("AND", "21F6 226F 8312 C000", expect_reg(3, 0x66)),
    InstructionCase("XOR", "21FF 220F 9312 C000", expect_reg(3, 0xF0)),
    InstructionCase("ROTATE", "2101 A101 C000", expect_reg(1, 0x80)),
    InstructionCase("JUMP", "B005 C000 C000", expect_pc(0x06)),
    InstructionCase("HALT", "C000 2101", expect_steps(1)),
    InstructionCase("UNUSED", "2101 D000 2102", expect_reg(1, 0x01)),
]


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.opcode)
def test_all_instructions_have_behavioral_tests(case: InstructionCase):
    kwargs = copy.deepcopy(case.options_kwargs)
    options = RunOptions(**kwargs) if kwargs else RunOptions()
    result = run_program(case.program, options=options)
    assert result.status == "ok"
    case.checker(result)


def test_instruction_case_coverage_matches_opcode_table():
    covered = {case.opcode for case in INSTRUCTION_CASES}
    assert covered == {opcode.name for opcode in DEFAULT_OPCODE_TABLE}

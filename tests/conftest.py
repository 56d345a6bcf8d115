"""
Shared fixtures for the stackgen test suite.

The generator does not execute code, but loop and conditional layouts are
easiest to check by running them. StackMachine below is a minimal
interpreter for the straight-line subset of the instruction set (globals,
constants, operators, jumps and print); it exists only for the tests.
"""

import operator
from dataclasses import dataclass, field

import pytest

from stackgen.ast import ASTNode
from stackgen.codegen import CodeGenerator
from stackgen.instruction import StackInstruction
from stackgen.opcodes import Opcode, BINARY_OPS, STDLIB


# =============================================================================
# Test Stack Machine
# =============================================================================

_OPERATORS = {
    "||": lambda a, b: a or b,
    "&&": lambda a, b: a and b,
    "<=": operator.le,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    ">": operator.gt,
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "%": operator.mod,
    "**": operator.pow,
}

BINARY_FUNCS = {BINARY_OPS[symbol]: fn for symbol, fn in _OPERATORS.items()}


@dataclass
class MachineResult:
    """Outcome of running a program on the test machine."""
    instructions: list[StackInstruction]
    globals: dict[str, object] = field(default_factory=dict)
    printed: list[object] = field(default_factory=list)
    steps: int = 0


class StackMachine:
    """Executes generator output that contains no function definitions."""

    def __init__(self, names: list[str], constants: list[object], max_steps: int = 10_000):
        self.names = names
        self.constants = constants
        self.max_steps = max_steps

    def run(self, instructions: list[StackInstruction]) -> MachineResult:
        result = MachineResult(instructions)
        slots: dict[int, object] = {}
        stack: list[object] = []
        pc = 0

        while pc < len(instructions):
            result.steps += 1
            if result.steps > self.max_steps:
                raise RuntimeError("step limit exceeded")

            instr = instructions[pc]
            pc += 1
            op = instr.opcode

            if op is Opcode.LOAD_CONST:
                stack.append(self.constants[instr.operand])
            elif op is Opcode.LOAD_NAME:
                stack.append(slots[instr.operand])
            elif op is Opcode.STORE_NAME:
                slots[instr.operand] = stack.pop()
            elif op is Opcode.BINARY_OP:
                right = stack.pop()
                left = stack.pop()
                stack.append(BINARY_FUNCS[instr.operand](left, right))
            elif op is Opcode.UNARY_NOT:
                stack.append(not stack.pop())
            elif op is Opcode.UNARY_NEGATIVE:
                stack.append(-stack.pop())
            elif op is Opcode.JUMP:
                pc = instr.operand
            elif op is Opcode.JUMP_IF_FALSE:
                if not stack.pop():
                    pc = instr.operand
            elif op is Opcode.CALL_STDLIB and instr.operand == STDLIB["print"]:
                result.printed.append(stack.pop())
            else:
                raise NotImplementedError(f"test machine cannot run {op}")

        assert not stack, f"stack not balanced: {stack}"
        result.globals = {self.names[ident]: value for ident, value in slots.items()}
        return result


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def run_program():
    """Generate code for a tree and execute it on the test machine."""
    def _run(tree: ASTNode) -> MachineResult:
        generator = CodeGenerator()
        instructions = generator.generate(tree)
        machine = StackMachine(generator.variable_names, generator.constant_values)
        return machine.run(instructions)
    return _run

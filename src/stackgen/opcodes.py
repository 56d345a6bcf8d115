"""
Stack Machine Instruction Set
=============================

This module defines the opcode set of the target stack machine together
with the two fixed enumerations that the generator and any consuming
virtual machine must agree on: binary operator codes and the standard
library function table.

Opcodes
-------
| Opcode         | Operand              | Stack effect                      |
|----------------|----------------------|-----------------------------------|
| LOAD_NAME      | variable id          | push global                       |
| STORE_NAME     | variable id          | pop into global                   |
| LOAD_FAST      | parameter slot       | push local parameter              |
| LOAD_CONST     | constant id          | push constant                     |
| MAKE_FUNCTION  | -                    | start of a function body          |
| CALL           | -                    | call; arity inferred by consumer  |
| CALL_STDLIB    | stdlib id            | call built-in (print is 0)        |
| BINARY_OP      | operator code        | pop 2, push result                |
| UNARY_NOT      | -                    | logical not of top                |
| UNARY_NEGATIVE | -                    | negate top                        |
| JUMP           | target address       | unconditional jump                |
| JUMP_IF_FALSE  | target address       | pop, jump when false              |
"""

from enum import Enum


class Opcode(Enum):
    """Stack machine opcodes. The value is the mnemonic used in listings."""
    LOAD_NAME = "LOAD_NAME"
    STORE_NAME = "STORE_NAME"
    LOAD_FAST = "LOAD_FAST"
    LOAD_CONST = "LOAD_CONST"
    MAKE_FUNCTION = "MAKE_FUNCTION"
    CALL = "CALL"
    CALL_STDLIB = "CALL_STDLIB"
    BINARY_OP = "BINARY_OP"
    UNARY_NOT = "UNARY_NOT"
    UNARY_NEGATIVE = "UNARY_NEGATIVE"
    JUMP = "JUMP"
    JUMP_IF_FALSE = "JUMP_IF_FALSE"

    def __str__(self) -> str:
        return self.value


# Opcodes whose operand is an instruction address.
JUMP_OPCODES = frozenset({Opcode.JUMP, Opcode.JUMP_IF_FALSE})


# =============================================================================
# Binary Operator Codes
# =============================================================================
# Operand of BINARY_OP. Shared with the virtual machine, do not renumber.

BINARY_OPS: dict[str, int] = {
    "||": 0,
    "&&": 1,
    "<=": 2,
    "<": 3,
    "==": 4,
    "!=": 5,
    ">=": 6,
    ">": 7,
    "+": 8,
    "-": 9,
    "*": 10,
    "/": 11,
    "%": 12,
    "**": 13,
}


# =============================================================================
# Standard Library Functions
# =============================================================================
# Operand of CALL_STDLIB. Shared with the virtual machine, do not renumber.

STDLIB: dict[str, int] = {
    "print": 0,
    "sqrt": 1,
    "sin": 2,
    "cos": 3,
    "exp": 4,
    "ln": 5,
    "hypot": 6,
}

NOT_OPERATOR = "!"

"""
Instruction Records
===================

The generator's output is a list of StackInstruction records. Each record
carries its own address, which always equals its index in the list.

Listing Format
--------------
``str(instruction)`` renders one listing line::

    0000  LOAD_NAME       0         ; x
    0001  LOAD_CONST      0         ; 3
    0002  BINARY_OP       3         ; <
    0003  JUMP_IF_FALSE   9
    0004  LOAD_NAME       0         ; x

Jump operands are addresses; every other operand is an id or code whose
meaning depends on the opcode (see stackgen.opcodes).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from stackgen.opcodes import Opcode


DisplayValue = Union[str, int, float, bool]


@dataclass
class StackInstruction:
    """
    One stack machine instruction.

    Attributes:
        address: Position of this instruction in the output sequence
        opcode: The operation
        operand: Integer argument (id, slot, operator code or address)
        display: Original name or literal value, for listings only
    """
    address: int
    opcode: Opcode
    operand: Optional[int] = None
    display: Optional[DisplayValue] = None

    def __str__(self) -> str:
        """Format as a listing line."""
        operand = "" if self.operand is None else str(self.operand)
        line = f"{self.address:04d}  {self.opcode.value:<15} {operand}"
        if self.display is not None:
            return f"{line:<30}  ; {_display_str(self.display)}"
        return line.rstrip()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "opcode": self.opcode.value,
            "operand": self.operand,
            "display": self.display,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StackInstruction":
        """Rebuild an instruction from the output of to_dict()."""
        return cls(
            address=data["address"],
            opcode=Opcode(data["opcode"]),
            operand=data.get("operand"),
            display=data.get("display"),
        )


def _display_str(value: DisplayValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_listing(instructions: Iterable[StackInstruction]) -> str:
    """
    Render instructions as a multi-line listing.

    Args:
        instructions: Generator output

    Returns:
        One line per instruction, newline separated
    """
    return "\n".join(str(instr) for instr in instructions)

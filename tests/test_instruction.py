"""
Tests for instruction records and listing output.
"""

import json

from stackgen.ast import Program, PrintStatement, BooleanLiteral
from stackgen.codegen import generate
from stackgen.instruction import StackInstruction, format_listing
from stackgen.opcodes import Opcode


class TestListing:
    """Tests for str(StackInstruction) and format_listing()."""

    def test_with_display(self):
        instr = StackInstruction(1, Opcode.STORE_NAME, 0, "x")
        assert str(instr) == "0001  STORE_NAME      0         ; x"

    def test_without_display(self):
        instr = StackInstruction(3, Opcode.JUMP_IF_FALSE, 9)
        assert str(instr) == "0003  JUMP_IF_FALSE   9"

    def test_without_operand(self):
        assert str(StackInstruction(12, Opcode.CALL)) == "0012  CALL"

    def test_boolean_display(self):
        instr = StackInstruction(0, Opcode.LOAD_CONST, 0, False)
        assert str(instr).endswith("; false")

    def test_format_listing(self):
        code = generate(Program([PrintStatement(BooleanLiteral(True))]))
        assert format_listing(code).splitlines() == [
            "0000  LOAD_CONST      0         ; true",
            "0001  CALL_STDLIB     0         ; print",
        ]

    def test_empty_listing(self):
        assert format_listing([]) == ""


class TestSerialization:
    """Tests for to_dict() / from_dict()."""

    def test_to_dict(self):
        instr = StackInstruction(4, Opcode.BINARY_OP, 8, "+")
        assert instr.to_dict() == {
            "address": 4,
            "opcode": "BINARY_OP",
            "operand": 8,
            "display": "+",
        }

    def test_json_compatible(self):
        instr = StackInstruction(0, Opcode.MAKE_FUNCTION)
        text = json.dumps(instr.to_dict())
        assert StackInstruction.from_dict(json.loads(text)) == instr

    def test_opcode_str(self):
        assert str(Opcode.UNARY_NEGATIVE) == "UNARY_NEGATIVE"

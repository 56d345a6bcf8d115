"""
stackgen - Stack Machine Code Generator
=======================================

This package lowers the syntax tree of a small imperative language
(declarations, assignment, while loops, conditional expressions,
functions and calls, arithmetic and boolean expressions, print) into a
flat sequence of instructions for a stack-based virtual machine.

Pipeline
--------
    Syntax tree (external parser or JSON) → CodeGenerator → StackInstruction list

Main Components
---------------
- **ast**: syntax tree node classes, visitor base and tree printer
- **codegen**: the single-pass generator with jump backpatching
- **symbols**: name/constant interning and parameter scopes
- **opcodes**: opcode set, binary operator codes, standard library table
- **instruction**: instruction records and listing output
- **treeio**: JSON interchange for syntax trees
- **cli**: the ``stackgen`` command

Quick Start
-----------
>>> from stackgen import generate, format_listing
>>> from stackgen.ast import Program, PrintStatement, NumberLiteral
>>> print(format_listing(generate(Program([PrintStatement(NumberLiteral(7))]))))
0000  LOAD_CONST      0         ; 7
0001  CALL_STDLIB     0         ; print
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from stackgen.codegen import CodeGenerator, GeneratorOptions, generate
from stackgen.errors import StackGenError, CodeGenError, TreeFormatError
from stackgen.instruction import StackInstruction, format_listing
from stackgen.opcodes import Opcode, BINARY_OPS, STDLIB
from stackgen.symbols import SymbolTable, ParameterScope
from stackgen.treeio import load_tree, tree_from_dict, tree_to_dict

__all__ = [
    # Version
    "__version__",
    # Main API
    "CodeGenerator",
    "GeneratorOptions",
    "generate",
    # Errors
    "StackGenError",
    "CodeGenError",
    "TreeFormatError",
    # Output
    "StackInstruction",
    "format_listing",
    "Opcode",
    "BINARY_OPS",
    "STDLIB",
    # Symbol tables
    "SymbolTable",
    "ParameterScope",
    # Tree interchange
    "load_tree",
    "tree_from_dict",
    "tree_to_dict",
]

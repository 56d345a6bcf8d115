"""
Stack Machine Code Generator
============================

This module lowers a syntax tree (stackgen.ast) into a flat list of
StackInstruction records for a stack-based virtual machine. It is a single
depth-first pass: every node appends zero or more instructions, and the
program counter is always the length of the output list.

Code Generation Strategy
------------------------
Expressions push exactly one value; statements leave the stack balanced.
Names resolve in two tiers:

1. Parameters of the function being generated -> LOAD_FAST(slot)
2. Everything else -> LOAD_NAME(variable id)

Variable names and literal constants are interned to dense ids in order of
first appearance (see stackgen.symbols).

Backpatching
------------
Control flow needs jump targets that are only known after the code they
jump over has been generated. The generator reserves a placeholder
instruction at the jump's address, generates the intervening code, then
overwrites the placeholder's operand in place. Placeholders occupy their
slot from the start, so nothing is ever inserted or shifted and every
address handed out stays valid.

While loop layout::

    test:   <test code>
            JUMP_IF_FALSE exit
            <body code>
            JUMP test
    exit:

Conditional (test ? consequent : alternate) layout::

            <test code>
            JUMP_IF_FALSE alt
            <consequent code>
            JUMP end
    alt:    <alternate code>
    end:

Usage
-----
>>> from stackgen.ast import Program, VariableDeclaration, NumberLiteral
>>> from stackgen.codegen import generate
>>> tree = Program([VariableDeclaration("x", NumberLiteral(42))])
>>> for instr in generate(tree):
...     print(instr)
0000  LOAD_CONST      0         ; 42
0001  STORE_NAME      0         ; x
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from stackgen.ast import (
    ASTNode,
    ASTVisitor,
    Program,
    Sequence,
    VariableDeclaration,
    FunctionDeclaration,
    PrintStatement,
    Assignment,
    WhileStatement,
    Variable,
    FunctionReference,
    Call,
    Conditional,
    BinaryExpression,
    UnaryExpression,
    NumberLiteral,
    BooleanLiteral,
)
from stackgen.errors import CodeGenError
from stackgen.instruction import StackInstruction, DisplayValue
from stackgen.opcodes import Opcode, BINARY_OPS, JUMP_OPCODES, STDLIB, NOT_OPERATOR
from stackgen.symbols import SymbolTable, ParameterScope


logger = logging.getLogger(__name__)


# =============================================================================
# Generator Options
# =============================================================================

@dataclass
class GeneratorOptions:
    """
    Code generator configuration options.

    Attributes:
        stdlib_function_refs: Resolve a FunctionReference that names a
                     standard library function (sqrt, sin, ...) to its
                     stdlib id via LOAD_NAME instead of interning it as a
                     variable. Parameters still take priority.
        validate_addresses: Check after generation that every reserved jump
                     slot was patched and that addresses run 0..N-1.
    """
    stdlib_function_refs: bool = False
    validate_addresses: bool = True


# =============================================================================
# Per-Run State
# =============================================================================

@dataclass
class GenerationContext:
    """
    Mutable state of one generate() call.

    Attributes:
        output: Instructions emitted so far, including placeholders
        variables: Interned variable and function names
        constants: Interned literal values
        params: Parameters of the function currently being generated
        pending: Addresses of reserved slots not yet patched
    """
    output: list[StackInstruction] = field(default_factory=list)
    variables: SymbolTable = field(default_factory=SymbolTable)
    constants: SymbolTable = field(default_factory=lambda: SymbolTable(literal_keys=True))
    params: ParameterScope = field(default_factory=ParameterScope)
    pending: set[int] = field(default_factory=set)

    @property
    def program_counter(self) -> int:
        """Address of the next instruction."""
        return len(self.output)


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator(ASTVisitor):
    """
    Generates stack machine instructions from a syntax tree.

    The generator keeps no state between runs: each call to generate()
    starts from fresh symbol tables and an empty output list. The tables of
    the most recent run stay readable through variable_names and
    constant_values so that a loader can build the name and constant pools.

    Attributes:
        options: Generator configuration
    """

    def __init__(self, options: Optional[GeneratorOptions] = None):
        """
        Initialize the code generator.

        Args:
            options: Generator configuration (uses defaults if None)
        """
        self.options = options or GeneratorOptions()
        self._ctx = GenerationContext()

    def generate(self, program: ASTNode) -> list[StackInstruction]:
        """
        Generate instructions for a complete program.

        Args:
            program: The root node, normally a Program

        Returns:
            Instructions whose addresses are exactly 0..N-1

        Raises:
            CodeGenError: On an unknown node type or operator, or when an
                          internal address invariant is violated
        """
        self._ctx = GenerationContext()
        self.visit(program)

        if self.options.validate_addresses:
            self._check_addresses()

        logger.debug(
            f"Generated {len(self._ctx.output)} instructions "
            f"({len(self._ctx.variables)} names, {len(self._ctx.constants)} constants)"
        )
        return self._ctx.output

    @property
    def variable_names(self) -> list[str]:
        """Variable names of the last run, indexed by variable id."""
        return self._ctx.variables.keys()

    @property
    def constant_values(self) -> list[DisplayValue]:
        """Literal values of the last run, indexed by constant id."""
        return self._ctx.constants.keys()

    # =========================================================================
    # Instruction Output Methods
    # =========================================================================

    def _emit(
        self,
        opcode: Opcode,
        operand: Optional[int] = None,
        display: Optional[DisplayValue] = None,
    ) -> int:
        """Append an instruction at the program counter and return its address."""
        address = self._ctx.program_counter
        self._ctx.output.append(StackInstruction(address, opcode, operand, display))
        return address

    def _reserve(self, opcode: Opcode) -> int:
        """Append a jump placeholder whose target is filled in by _patch()."""
        slot = self._emit(opcode)
        self._ctx.pending.add(slot)
        logger.debug(f"Reserved {opcode} at {slot}")
        return slot

    def _patch(self, slot: int, target: int) -> None:
        """Set the target of the placeholder reserved at slot."""
        if slot not in self._ctx.pending:
            raise CodeGenError(f"no reserved jump at address {slot}")
        self._ctx.pending.discard(slot)
        self._ctx.output[slot].operand = target
        logger.debug(f"Patched {self._ctx.output[slot].opcode} at {slot} -> {target}")

    def _emit_read(self, name: str) -> None:
        """Push the value bound to name: parameter slot first, then global."""
        params = self._ctx.params
        if params.is_param(name):
            self._emit(Opcode.LOAD_FAST, params.slot_of(name), name)
        else:
            self._emit(Opcode.LOAD_NAME, self._ctx.variables.intern(name), name)

    def _emit_store(self, name: str) -> None:
        self._emit(Opcode.STORE_NAME, self._ctx.variables.intern(name), name)

    def _emit_constant(self, value: DisplayValue) -> None:
        self._emit(Opcode.LOAD_CONST, self._ctx.constants.intern(value), value)

    def _check_addresses(self) -> None:
        """Verify that slots were patched, addresses match positions and jumps stay in range."""
        if self._ctx.pending:
            slots = ", ".join(str(s) for s in sorted(self._ctx.pending))
            raise CodeGenError(f"unpatched jump placeholder(s) at {slots}")
        for index, instr in enumerate(self._ctx.output):
            if instr.address != index:
                raise CodeGenError(
                    f"instruction at position {index} has address {instr.address}"
                )
            if instr.opcode in JUMP_OPCODES and not 0 <= instr.operand <= len(self._ctx.output):
                raise CodeGenError(
                    f"{instr.opcode} at {index} targets {instr.operand}, "
                    f"outside 0..{len(self._ctx.output)}"
                )

    # =========================================================================
    # Program Structure
    # =========================================================================

    def visit_Program(self, node: Program) -> None:
        for stmt in node.statements:
            self.visit(stmt)

    def visit_Sequence(self, node: Sequence) -> None:
        for stmt in node.nodes:
            self.visit(stmt)

    def visit_list(self, nodes: list) -> None:
        """A plain list of statements is generated like a Sequence."""
        for stmt in nodes:
            self.visit(stmt)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> None:
        self.visit(node.initializer)
        self._emit_store(node.name)

    def visit_FunctionDeclaration(self, node: FunctionDeclaration) -> None:
        """
        Generate a function definition.

        MAKE_FUNCTION marks the start of the body in the flat stream; the
        trailing STORE_NAME binds the function to its name.
        """
        self._emit(Opcode.MAKE_FUNCTION)

        self._ctx.params.enter(node.params)
        logger.debug(f"Function {node.name}: {len(self._ctx.params)} parameter(s)")

        if node.body is not None:
            self.visit(node.body)
        self._emit_store(node.name)

        self._ctx.params.exit()

    def visit_PrintStatement(self, node: PrintStatement) -> None:
        self.visit(node.argument)
        self._emit(Opcode.CALL_STDLIB, STDLIB["print"], "print")

    def visit_Assignment(self, node: Assignment) -> None:
        self.visit(node.source)
        self._emit_store(node.target)

    def visit_WhileStatement(self, node: WhileStatement) -> None:
        """Generate a pre-tested loop; the exit jump is patched after the body."""
        test_address = self._ctx.program_counter
        self.visit(node.test)
        exit_jump = self._reserve(Opcode.JUMP_IF_FALSE)

        if node.body is not None:
            self.visit(node.body)
        self._emit(Opcode.JUMP, test_address)

        self._patch(exit_jump, self._ctx.program_counter)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_Variable(self, node: Variable) -> None:
        self._emit_read(node.name)

    def visit_FunctionReference(self, node: FunctionReference) -> None:
        if (
            self.options.stdlib_function_refs
            and not self._ctx.params.is_param(node.name)
            and node.name in STDLIB
        ):
            self._emit(Opcode.LOAD_NAME, STDLIB[node.name], node.name)
            return
        self._emit_read(node.name)

    def visit_Call(self, node: Call) -> None:
        """
        Generate a call: callee, then arguments left to right, then CALL.

        CALL carries no arity; the consumer infers it from the callee.
        """
        self._emit_read(node.callee.name)
        for arg in node.args:
            self.visit(arg)
        self._emit(Opcode.CALL)

    def visit_Conditional(self, node: Conditional) -> None:
        """Generate test ? consequent : alternate with two patched jumps."""
        self.visit(node.test)
        to_alternate = self._reserve(Opcode.JUMP_IF_FALSE)
        self.visit(node.consequent)
        to_end = self._reserve(Opcode.JUMP)
        self.visit(node.alternate)

        self._patch(to_alternate, to_end + 1)
        self._patch(to_end, self._ctx.program_counter)

    def visit_BinaryExpression(self, node: BinaryExpression) -> None:
        code = BINARY_OPS.get(node.op)
        if code is None:
            raise CodeGenError(
                f"unknown binary operator '{node.op}'",
                hint=f"expected one of {', '.join(BINARY_OPS)}",
            )
        self.visit(node.left)
        self.visit(node.right)
        self._emit(Opcode.BINARY_OP, code, node.op)

    def visit_UnaryExpression(self, node: UnaryExpression) -> None:
        self.visit(node.operand)
        if node.op == NOT_OPERATOR:
            self._emit(Opcode.UNARY_NOT)
        else:
            self._emit(Opcode.UNARY_NEGATIVE)

    def visit_NumberLiteral(self, node: NumberLiteral) -> None:
        self._emit_constant(node.value)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> None:
        self._emit_constant(node.value)


# =============================================================================
# Convenience Function
# =============================================================================

def generate(program: ASTNode, options: Optional[GeneratorOptions] = None) -> list[StackInstruction]:
    """
    Generate stack machine instructions for a program.

    Args:
        program: Root of the syntax tree
        options: Generator configuration (uses defaults if None)

    Returns:
        Instructions with contiguous addresses starting at 0
    """
    return CodeGenerator(options).generate(program)

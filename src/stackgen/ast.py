"""
Syntax Tree Definitions
=======================

This module defines the syntax tree node types consumed by the stack code
generator. Trees are produced by an external parser (or loaded from JSON by
stackgen.treeio); the generator only reads them.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node containing the top-level statements
├── Sequence - ordered block of statements
├── Statements
│   ├── VariableDeclaration - introduce and initialise a variable
│   ├── FunctionDeclaration - named function with parameters and body
│   ├── PrintStatement - print primitive
│   ├── Assignment - store into an existing variable
│   └── WhileStatement - pre-tested loop
└── Expressions
    ├── Variable - variable read
    ├── FunctionReference - function name used as a value or callee
    ├── Call - function call
    ├── Conditional - expression-valued if/else (test ? a : b)
    ├── BinaryExpression - binary operators
    ├── UnaryExpression - ! and unary minus
    ├── NumberLiteral - numeric constant
    └── BooleanLiteral - true / false

Design Notes
------------
- All nodes are dataclasses, so structurally equal trees compare equal
- Operators are kept as their source spelling ("+", "<=", "!", ...);
  opcode tables in stackgen.opcodes map them to numeric codes
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from stackgen.errors import CodeGenError


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all syntax tree nodes.
    """
    pass


@dataclass
class Expression(ASTNode):
    """
    Base class for all expression nodes.

    Expressions leave exactly one value on the machine stack.
    """
    pass


@dataclass
class Statement(ASTNode):
    """
    Base class for all statement nodes.

    Statements leave the machine stack as they found it.
    """
    pass


# =============================================================================
# Program Root and Blocks
# =============================================================================

@dataclass
class Program(ASTNode):
    """
    Root node of a complete program.

    Attributes:
        statements: Top-level statements in source order
    """
    statements: list[ASTNode] = field(default_factory=list)


@dataclass
class Sequence(ASTNode):
    """
    Ordered list of nodes, used for statement blocks.

    Visitors also accept a plain Python list wherever a block is expected
    and treat it as a Sequence of its items.

    Attributes:
        nodes: The block's statements in source order
    """
    nodes: list[ASTNode] = field(default_factory=list)


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class VariableDeclaration(Statement):
    """
    Variable declaration with initializer, e.g. ``let x = 1 + 2``.

    Attributes:
        name: Variable name
        initializer: Expression producing the initial value
    """
    name: str = ""
    initializer: Optional[Expression] = None


@dataclass
class FunctionDeclaration(Statement):
    """
    Function definition.

    Functions do not nest, so at most one parameter scope is ever active.

    Attributes:
        name: Function name
        params: Parameter names in declaration order
        body: Function body
    """
    name: str = ""
    params: list[str] = field(default_factory=list)
    body: Optional[ASTNode] = None


@dataclass
class PrintStatement(Statement):
    """
    Print the value of an expression.

    Attributes:
        argument: Expression to print
    """
    argument: Optional[Expression] = None


@dataclass
class Assignment(Statement):
    """
    Assignment to an existing variable, e.g. ``x = x + 1``.

    Attributes:
        target: Name of the variable being assigned
        source: Expression producing the new value
    """
    target: str = ""
    source: Optional[Expression] = None


@dataclass
class WhileStatement(Statement):
    """
    While loop: ``while (test) { body }``.

    Attributes:
        test: Loop condition, evaluated before every iteration
        body: Loop body
    """
    test: Optional[Expression] = None
    body: Optional[ASTNode] = None


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Variable(Expression):
    """
    Read of a variable or parameter.

    Attributes:
        name: Variable name
    """
    name: str = ""


@dataclass
class FunctionReference(Expression):
    """
    A function name used as an expression, typically as a call's callee.

    Attributes:
        name: Function name
    """
    name: str = ""


@dataclass
class Call(Expression):
    """
    Function call: ``callee(arg0, arg1, ...)``.

    Attributes:
        callee: The called function, resolved by name
        args: Argument expressions, evaluated left to right
    """
    callee: Optional[Union[FunctionReference, Variable]] = None
    args: list[Expression] = field(default_factory=list)


@dataclass
class Conditional(Expression):
    """
    Expression-valued if/else: ``test ? consequent : alternate``.

    Attributes:
        test: Condition
        consequent: Value when the condition holds
        alternate: Value otherwise
    """
    test: Optional[Expression] = None
    consequent: Optional[Expression] = None
    alternate: Optional[Expression] = None


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation (arithmetic, comparison, logical).

    Attributes:
        op: Operator spelling, e.g. "+", "<=", "&&"
        left: Left operand
        right: Right operand
    """
    op: str = ""
    left: Optional[Expression] = None
    right: Optional[Expression] = None


@dataclass
class UnaryExpression(Expression):
    """
    Unary operation: logical not ("!") or negation ("-").

    Attributes:
        op: Operator spelling
        operand: The operand expression
    """
    op: str = ""
    operand: Optional[Expression] = None


@dataclass
class NumberLiteral(Expression):
    """
    Numeric constant.

    Attributes:
        value: The number (int or float)
    """
    value: Union[int, float] = 0


@dataclass
class BooleanLiteral(Expression):
    """
    Boolean constant.

    Attributes:
        value: True or False
    """
    value: bool = False


# Every concrete node class, keyed by class name.
NODE_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
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
}


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Provides a visitor pattern for traversing the tree. Subclasses
    override visit_* methods for specific node types they care about.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_FunctionDeclaration(self, node):
                # Handle function definitions
                pass

        visitor = MyVisitor()
        visitor.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Any) -> None:
        """
        Default visit method for node types without a visit_* method.

        Raises:
            CodeGenError: Always; trees must be built from the classes above
        """
        raise CodeGenError(
            f"no {type(self).__name__} rule for node type '{type(node).__name__}'",
            hint="the tree must be built from stackgen.ast node classes",
        )


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces a human-readable, indented representation of the tree.

    Usage:
        printer = ASTPrinter()
        output = printer.print(tree)
        print(output)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _block(self, node: Optional[ASTNode]) -> None:
        self._indent()
        if node is not None:
            self.visit(node)
        self._dedent()

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_Sequence(self, node: Sequence):
        self._emit("Block")
        self._indent()
        for stmt in node.nodes:
            self.visit(stmt)
        self._dedent()

    def visit_list(self, nodes: list):
        self.visit_Sequence(Sequence(nodes))

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        self._emit(f"Let {node.name} = {self._expr_str(node.initializer)}")

    def visit_FunctionDeclaration(self, node: FunctionDeclaration):
        self._emit(f"Function: {node.name}({', '.join(node.params)})")
        self._block(node.body)

    def visit_PrintStatement(self, node: PrintStatement):
        self._emit(f"Print {self._expr_str(node.argument)}")

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Assign {node.target} = {self._expr_str(node.source)}")

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While ({self._expr_str(node.test)})")
        self._block(node.body)

    def generic_visit(self, node: ASTNode) -> None:
        self._emit(f"Expr: {self._expr_str(node)}")

    def _expr_str(self, expr: Optional[ASTNode]) -> str:
        """Convert expression to string representation."""
        if expr is None:
            return ""
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, NumberLiteral):
            return str(expr.value)
        if isinstance(expr, (Variable, FunctionReference)):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.op} {self._expr_str(expr.right)})"
        if isinstance(expr, UnaryExpression):
            return f"({expr.op}{self._expr_str(expr.operand)})"
        if isinstance(expr, Call):
            args = ", ".join(self._expr_str(a) for a in expr.args)
            return f"{self._expr_str(expr.callee)}({args})"
        if isinstance(expr, Conditional):
            return (
                f"({self._expr_str(expr.test)} ? {self._expr_str(expr.consequent)}"
                f" : {self._expr_str(expr.alternate)})"
            )
        return f"<{type(expr).__name__}>"

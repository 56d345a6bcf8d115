"""
stackgen Error Hierarchy
========================

This module defines the exception hierarchy for the stack code generator.
All exceptions inherit from StackGenError, allowing callers to catch every
generator-related error with a single except clause.

Exception Hierarchy
-------------------
StackGenError (base)
├── CodeGenError - internal invariant violated during generation
│                  (unknown node kind, unknown operator, unpatched slot)
└── TreeFormatError - malformed syntax tree interchange data

Design Philosophy
-----------------
The generator is a total transformation over well-formed trees. Structural
validity is guaranteed upstream by the parser, so a CodeGenError always
signals a programming error rather than a recoverable condition.

Error messages follow this format:
    error: description
    hint: suggestion for fixing (when available)
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class StackGenError(Exception):
    """
    Base exception for all stackgen errors.

    Attributes:
        message: The error description
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with an optional hint line.

        Example output:
            error: unknown binary operator '<>'
            hint: expected one of ||, &&, <=, <, ==, !=, >=, >, +, -, *, /, %, **
        """
        parts = [f"error: {self.message}"]
        if self.hint:
            parts.append(f"hint: {self.hint}")
        return "\n".join(parts)


# =============================================================================
# Generation Errors
# =============================================================================

class CodeGenError(StackGenError):
    """
    Internal invariant failure during code generation.

    Raised when the generator meets input it cannot lower, such as a node
    class with no generation rule or an operator missing from the operator
    table, or when a reserved jump slot is never backpatched.
    """
    pass


# =============================================================================
# Tree Interchange Errors
# =============================================================================

class TreeFormatError(StackGenError):
    """
    Malformed syntax tree data.

    Raised by the JSON tree loader when a node has an unknown "type" tag,
    is missing a field, or is not an object at all.

    Attributes:
        path: Location of the offending node inside the document,
              e.g. "statements[2].initializer"
    """

    def __init__(self, message: str, path: str = "", hint: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message, hint)

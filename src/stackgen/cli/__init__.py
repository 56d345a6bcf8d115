"""
stackgen Command-Line Interface
===============================

- **stackgen**: generate stack machine code from a JSON syntax tree

The tool is a Click-based CLI application with help and error reporting
shared through stackgen.cli.errors.
"""

__all__ = ["generate"]

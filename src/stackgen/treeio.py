"""
Syntax Tree Interchange
=======================

The parser is an external component, so trees reach the command-line tool
as JSON. Each node is an object whose "type" key names a class from
stackgen.ast; its remaining keys are the node's fields:

    {
      "type": "Program",
      "statements": [
        {"type": "VariableDeclaration", "name": "x",
         "initializer": {"type": "NumberLiteral", "value": 0}},
        {"type": "WhileStatement",
         "test": {"type": "BinaryExpression", "op": "<",
                  "left": {"type": "Variable", "name": "x"},
                  "right": {"type": "NumberLiteral", "value": 3}},
         "body": [
           {"type": "Assignment", "target": "x",
            "source": {"type": "BinaryExpression", "op": "+",
                       "left": {"type": "Variable", "name": "x"},
                       "right": {"type": "NumberLiteral", "value": 1}}}
         ]}
      ]
    }

A bare array where a single node is expected stands for a Sequence, and a
string where a Call's callee is expected stands for a FunctionReference.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Union

from stackgen.ast import (
    ASTNode,
    Call,
    FunctionReference,
    Sequence,
    NODE_TYPES,
)
from stackgen.errors import TreeFormatError


logger = logging.getLogger(__name__)

# Fields holding plain values rather than child nodes.
_SCALAR_FIELDS = {"name", "params", "target", "op", "value"}

# Fields holding a list of child nodes.
_LIST_FIELDS = {"statements", "nodes", "args"}


# =============================================================================
# Loading
# =============================================================================

def tree_from_dict(data: Any, path: str = "$") -> ASTNode:
    """
    Build a syntax tree from decoded JSON.

    Args:
        data: A node object, or a list of node objects (read as a Sequence)
        path: Location of data in the document, for error messages

    Returns:
        The root node

    Raises:
        TreeFormatError: On unknown node types, missing or unexpected fields
    """
    if isinstance(data, list):
        return Sequence([tree_from_dict(item, f"{path}[{i}]") for i, item in enumerate(data)])
    if not isinstance(data, dict):
        raise TreeFormatError(f"expected a node object, got {type(data).__name__}", path)

    type_name = data.get("type")
    if not isinstance(type_name, str):
        raise TreeFormatError(f"node 'type' must be a string, got {type(type_name).__name__}", path)
    node_class = NODE_TYPES.get(type_name)
    if node_class is None:
        raise TreeFormatError(
            f"unknown node type {type_name!r}",
            path,
            hint=f"expected one of {', '.join(NODE_TYPES)}",
        )

    field_names = [f.name for f in fields(node_class)]
    unexpected = set(data) - set(field_names) - {"type"}
    if unexpected:
        raise TreeFormatError(
            f"unexpected field(s) {', '.join(sorted(unexpected))} for {type_name}", path
        )

    kwargs = {}
    for name in field_names:
        if name not in data:
            raise TreeFormatError(f"{type_name} is missing field '{name}'", path)
        kwargs[name] = _convert_field(node_class, name, data[name], f"{path}.{name}")
    return node_class(**kwargs)


def _convert_field(node_class: type, name: str, value: Any, path: str) -> Any:
    if name in _SCALAR_FIELDS or value is None:
        return value
    if name in _LIST_FIELDS:
        if not isinstance(value, list):
            raise TreeFormatError(f"field '{name}' must be a list", path)
        return [tree_from_dict(item, f"{path}[{i}]") for i, item in enumerate(value)]
    if node_class is Call and name == "callee" and isinstance(value, str):
        return FunctionReference(value)
    return tree_from_dict(value, path)


def load_tree(source: Union[str, Path]) -> ASTNode:
    """
    Load a syntax tree from a JSON file.

    Args:
        source: Path to the JSON document

    Raises:
        TreeFormatError: If the file is not valid JSON or not a valid tree
        FileNotFoundError: If the file does not exist
    """
    path = Path(source)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise TreeFormatError(f"{path} is not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"invalid JSON in {path}: {e}") from e

    tree = tree_from_dict(data)
    logger.debug(f"Loaded {type(tree).__name__} from {path}")
    return tree


# =============================================================================
# Saving
# =============================================================================

def tree_to_dict(node: ASTNode) -> dict:
    """Convert a syntax tree to JSON-ready data accepted by tree_from_dict()."""
    result: dict[str, Any] = {"type": type(node).__name__}
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, ASTNode):
            result[f.name] = tree_to_dict(value)
        elif f.name in _LIST_FIELDS:
            result[f.name] = [tree_to_dict(item) for item in value]
        else:
            result[f.name] = value
    return result

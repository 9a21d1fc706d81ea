"""JSON serialization/deserialization for BrnoScript ASTs.

This module converts between the AST dataclasses and plain Python
dict/list structures suitable for JSON encoding, so a parsed program can
be saved with `--emit-ast` and executed later with `--ast`. Each node
becomes a dict tagged with its class name under "type"; statement lines
are kept.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List, Type

from . import ast
from .ast import Node, Stmt

NODE_TYPES: Dict[str, Type[Node]] = {
    cls.__name__: cls
    for cls in vars(ast).values()
    if isinstance(cls, type) and issubclass(cls, Node) and cls not in (Node, ast.Expr, Stmt)
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs = {}
    for f in fields(cls):
        if f.name in obj:
            kwargs[f.name] = ast_from_obj(obj[f.name])
        elif f.name != 'line':
            raise ValueError(f"AST node {t} is missing field '{f.name}'")
    node = cls(**kwargs)
    if isinstance(node, ast.Literal) and isinstance(node.value, int) and not isinstance(node.value, bool):
        # JSON writes 2.0 as 2.0, but hand-edited files may say 2
        node = ast.Literal(float(node.value))
    return node


def program_to_obj(statements: List[Stmt]) -> Dict[str, Any]:
    return {"type": "Program", "body": ast_to_obj(statements)}


def program_from_obj(obj: Any) -> List[Stmt]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError("AST file does not contain a Program")
    return ast_from_obj(obj["body"])

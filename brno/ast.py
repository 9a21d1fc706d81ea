"""Abstract Syntax Tree (AST) definitions for BrnoScript.

The parser produces a list of statement nodes. Nodes are immutable once
built. Statements remember the line of their first token for runtime
diagnostics; the line is ignored when comparing trees.

There is no dedicated array-literal node and no generic for-loop node:
`[a, b]` is parsed as a call to `__arr`, and `okruh (...)` is parsed
directly into a `For` node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # float, str, bool or None


@dataclass(frozen=True)
class Variable(Expr):
    name: str


@dataclass(frozen=True)
class Assign(Expr):
    name: str
    value: Expr


@dataclass(frozen=True)
class Unary(Expr):
    op: str
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: List[Expr]


@dataclass(frozen=True)
class Postfix(Expr):
    name: str
    op: str  # '++' or '--'


@dataclass(frozen=True)
class Get(Expr):
    obj: Expr
    name: str


@dataclass(frozen=True)
class FunctionExpr(Expr):
    params: List[str]
    body: List['Stmt']


# Statements

@dataclass(frozen=True, kw_only=True)
class Stmt(Node):
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Let(Stmt):
    name: str
    init: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class For(Stmt):
    init: Optional[Stmt]  # Let or ExprStmt
    condition: Optional[Expr]
    step: Optional[Expr]
    body: Stmt


@dataclass(frozen=True)
class FunctionDecl(Stmt):
    name: str
    params: List[str]
    body: List[Stmt]


@dataclass(frozen=True)
class Return(Stmt):
    value: Optional[Expr]


@dataclass(frozen=True)
class Import(Stmt):
    path: Expr


@dataclass(frozen=True)
class Try(Stmt):
    body: List[Stmt]
    name: Optional[str]  # identifier bound in the catch clause
    handler: Optional[List[Stmt]]
    finalizer: Optional[List[Stmt]]


@dataclass(frozen=True)
class Break(Stmt):
    pass


@dataclass(frozen=True)
class Continue(Stmt):
    pass

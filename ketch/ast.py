"""Abstract Syntax Tree (AST) definitions for the Ketch language.

The node set is closed: the parser only ever builds the classes below and
the interpreter dispatches over exactly these. Nodes are frozen and their
child sequences are tuples, so a parsed tree is never modified after
construction and a function body can be evaluated by any number of
concurrent calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...]


@dataclass(frozen=True)
class Let(Node):
    name: str
    expr: Node


@dataclass(frozen=True)
class Print(Node):
    expr: Node


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block]


@dataclass(frozen=True)
class While(Node):
    condition: Node
    body: Block


@dataclass(frozen=True)
class For(Node):
    init: Optional[Node]  # Let or any expression
    condition: Optional[Node]
    update: Optional[Node]
    body: Block


@dataclass(frozen=True)
class FunctionDef(Node):
    name: str
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class Return(Node):
    value: Optional[Node]


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: Union[int, float]


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...]

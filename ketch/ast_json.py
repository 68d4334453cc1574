"""JSON serialization/deserialization for the Ketch AST.

This module converts between Ketch AST dataclasses and plain Python
dict/list structures suitable for JSON encoding, so a parsed program can
be written out with `--emit-ast` and executed later with `--ast`.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Block,
    Let,
    Print,
    If,
    While,
    For,
    FunctionDef,
    Return,
    Assign,
    Variable,
    NumberLiteral,
    StringLiteral,
    BinaryOp,
    UnaryOp,
    Call,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, Let):
        return {"type": "Let", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Print):
        return {"type": "Print", "expr": ast_to_obj(node.expr)}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_block": ast_to_obj(node.else_block),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, For):
        return {
            "type": "For",
            "init": ast_to_obj(node.init),
            "condition": ast_to_obj(node.condition),
            "update": ast_to_obj(node.update),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, FunctionDef):
        return {
            "type": "FunctionDef",
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, Return):
        return {"type": "Return", "value": ast_to_obj(node.value)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, NumberLiteral):
        # JSON does not distinguish 1 from 1.0, so keep the kind explicitly
        kind = "Float" if isinstance(node.value, float) else "Integer"
        return {"type": "NumberLiteral", "value": node.value, "kind": kind}
    if isinstance(node, StringLiteral):
        return {"type": "StringLiteral", "value": node.value}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Block":
        return Block(statements=tuple(ast_from_obj(s) for s in obj["statements"]))
    if t == "Let":
        return Let(name=obj["name"], expr=ast_from_obj(obj["expr"]))
    if t == "Print":
        return Print(expr=ast_from_obj(obj["expr"]))
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_block=ast_from_obj(obj.get("else_block")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "For":
        return For(
            init=ast_from_obj(obj.get("init")),
            condition=ast_from_obj(obj.get("condition")),
            update=ast_from_obj(obj.get("update")),
            body=ast_from_obj(obj["body"]),
        )
    if t == "FunctionDef":
        return FunctionDef(
            name=obj["name"],
            params=tuple(obj["params"]),
            body=ast_from_obj(obj["body"]),
        )
    if t == "Return":
        return Return(value=ast_from_obj(obj.get("value")))
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "Variable":
        return Variable(name=obj["name"])
    if t == "NumberLiteral":
        return NumberLiteral(value=number_from_obj(obj))
    if t == "StringLiteral":
        return StringLiteral(value=obj["value"])
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "Call":
        return Call(name=obj["name"], args=tuple(ast_from_obj(a) for a in obj["args"]))

    raise ValueError(f"Unknown AST node type: {t}")


def number_from_obj(obj: Dict[str, Any]):
    if obj.get("kind") == "Float":
        return float(obj["value"])
    return int(obj["value"])

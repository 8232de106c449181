"""JSON serialization/deserialization for the ulang AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding, so a parsed program can be saved
with `--emit-ast` and executed later with `--ast`.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .ast import (
    Program,
    Assign,
    If,
    ElseIf,
    While,
    Until,
    Print,
    Input,
    FunctionDef,
    FunctionCall,
    Return,
    Condition,
    Add,
    Mul,
    Value,
    Number,
    Variable,
)


def _list_to_obj(nodes: Optional[List[Any]]) -> Optional[List[Any]]:
    if nodes is None:
        return None
    return [ast_to_obj(n) for n in nodes]


def _list_from_obj(objs: Optional[List[Any]]) -> Optional[List[Any]]:
    if objs is None:
        return None
    return [ast_from_obj(o) for o in objs]


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Statements
    if isinstance(node, Program):
        return {"type": "Program", "body": _list_to_obj(node.body)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "body": _list_to_obj(node.body),
            "elseifs": _list_to_obj(node.elseifs),
            "else_body": _list_to_obj(node.else_body),
        }
    if isinstance(node, ElseIf):
        return {"type": "ElseIf", "condition": ast_to_obj(node.condition), "body": _list_to_obj(node.body)}
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": _list_to_obj(node.body)}
    if isinstance(node, Until):
        return {"type": "Until", "condition": ast_to_obj(node.condition), "body": _list_to_obj(node.body)}
    if isinstance(node, Print):
        return {"type": "Print", "exprs": _list_to_obj(node.exprs)}
    if isinstance(node, Input):
        return {"type": "Input", "name": node.name}
    if isinstance(node, FunctionDef):
        return {
            "type": "FunctionDef",
            "name": node.name,
            "params": list(node.params),
            "body": _list_to_obj(node.body),
        }
    if isinstance(node, FunctionCall):
        return {"type": "FunctionCall", "name": node.name, "args": _list_to_obj(node.args)}
    if isinstance(node, Return):
        return {"type": "Return", "expr": ast_to_obj(node.expr)}

    # Expressions
    if isinstance(node, Condition):
        return {
            "type": "Condition",
            "left": ast_to_obj(node.left),
            "op": node.op,
            "right": ast_to_obj(node.right),
            "logic": node.logic,
            "rest": ast_to_obj(node.rest),
        }
    if isinstance(node, Add):
        return {"type": "Add", "left": ast_to_obj(node.left), "op": node.op, "right": ast_to_obj(node.right)}
    if isinstance(node, Mul):
        return {"type": "Mul", "left": ast_to_obj(node.left), "op": node.op, "right": ast_to_obj(node.right)}
    if isinstance(node, Value):
        return {
            "type": "Value",
            "operand": ast_to_obj(node.operand),
            "negate": node.negate,
            "exponent": node.exponent,
        }
    if isinstance(node, Number):
        return {"type": "Number", "value": node.value}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=_list_from_obj(obj["body"]))
    if t == "Assign":
        return Assign(name=obj["name"], expr=ast_from_obj(obj["expr"]))
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            body=_list_from_obj(obj["body"]),
            elseifs=_list_from_obj(obj.get("elseifs", [])),
            else_body=_list_from_obj(obj.get("else_body")),
        )
    if t == "ElseIf":
        return ElseIf(condition=ast_from_obj(obj["condition"]), body=_list_from_obj(obj["body"]))
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=_list_from_obj(obj["body"]))
    if t == "Until":
        return Until(condition=ast_from_obj(obj["condition"]), body=_list_from_obj(obj["body"]))
    if t == "Print":
        return Print(exprs=_list_from_obj(obj["exprs"]))
    if t == "Input":
        return Input(name=obj["name"])
    if t == "FunctionDef":
        return FunctionDef(name=obj["name"], params=list(obj["params"]), body=_list_from_obj(obj["body"]))
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], args=_list_from_obj(obj["args"]))
    if t == "Return":
        return Return(expr=ast_from_obj(obj["expr"]))
    if t == "Condition":
        return Condition(
            left=ast_from_obj(obj["left"]),
            op=obj["op"],
            right=ast_from_obj(obj["right"]),
            logic=obj.get("logic"),
            rest=ast_from_obj(obj.get("rest")),
        )
    if t == "Add":
        return Add(left=ast_from_obj(obj["left"]), op=obj.get("op"), right=ast_from_obj(obj.get("right")))
    if t == "Mul":
        return Mul(left=ast_from_obj(obj["left"]), op=obj.get("op"), right=ast_from_obj(obj.get("right")))
    if t == "Value":
        exponent = obj.get("exponent")
        return Value(
            operand=ast_from_obj(obj["operand"]),
            negate=bool(obj.get("negate", False)),
            exponent=float(exponent) if exponent is not None else None,
        )
    if t == "Number":
        return Number(value=float(obj["value"]))
    if t == "Variable":
        return Variable(name=obj["name"])

    raise ValueError(f"Unknown AST node type: {t}")

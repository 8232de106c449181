"""Abstract Syntax Tree (AST) definitions for the ulang language.

The node classes mirror the grammar one production at a time. Statements
and expressions are closed sets of frozen dataclasses: once the parser has
built a `Program` nothing in it changes. The interpreter dispatches on the
concrete class of each node.

Expression nodes follow the grammar's precedence ladder rather than a
generic binary-operator node, so that the right-recursive shape of `Add`
and `Mul` chains is visible in the tree itself:

    Condition := Add CompOp Add [(and|or) Condition]
    Add       := Mul [(+|-) Add]
    Mul       := Value [(*|/) Mul]
    Value     := [-] (Number | FunctionCall | Variable | Add) [^ number]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class Number(Node):
    value: float


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class FunctionCall(Node):
    """A call; appears both as a statement and as a Value operand."""
    name: str
    args: List['Add']


@dataclass(frozen=True)
class Value(Node):
    operand: Union[Number, Variable, FunctionCall, 'Add']
    negate: bool = False
    exponent: Optional[float] = None


@dataclass(frozen=True)
class Mul(Node):
    left: Value
    op: Optional[str] = None  # '*' or '/'
    right: Optional['Mul'] = None


@dataclass(frozen=True)
class Add(Node):
    left: Mul
    op: Optional[str] = None  # '+' or '-'
    right: Optional['Add'] = None


@dataclass(frozen=True)
class Condition(Node):
    left: Add
    op: str  # one of == != < > <= >=
    right: Add
    logic: Optional[str] = None  # 'and' or 'or'
    rest: Optional['Condition'] = None


# Statements

@dataclass(frozen=True)
class Assign(Node):
    name: str
    expr: Add


@dataclass(frozen=True)
class ElseIf(Node):
    condition: Condition
    body: List[Node]


@dataclass(frozen=True)
class If(Node):
    condition: Condition
    body: List[Node]
    elseifs: List[ElseIf]
    else_body: Optional[List[Node]] = None


@dataclass(frozen=True)
class While(Node):
    condition: Condition
    body: List[Node]


@dataclass(frozen=True)
class Until(Node):
    condition: Condition
    body: List[Node]


@dataclass(frozen=True)
class Print(Node):
    exprs: List[Add]


@dataclass(frozen=True)
class Input(Node):
    name: str


@dataclass(frozen=True)
class FunctionDef(Node):
    name: str
    params: List[str]
    body: List[Node]


@dataclass(frozen=True)
class Return(Node):
    expr: Add


@dataclass(frozen=True)
class Program(Node):
    body: List[Node]

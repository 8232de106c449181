"""Lark grammar for the ulang language.

This is an alternate parser backend. It accepts exactly the language of
`ulang.parser.Parser` and its transformer builds the same AST, so either
can feed the interpreter. The grammar is LALR(1): the assignment/call
choice after an identifier is decided by the single lookahead token, just
as in the hand-written parser. The basic lexer is used so that keywords
stay reserved in every context.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Program, Assign, If, ElseIf, While, Until, Print, Input, FunctionDef,
    FunctionCall, Return, Condition, Add, Mul, Value, Number, Variable,
)
from .errors import LexError, ParseError, ResourceExhausted


ULANG_GRAMMAR = r"""
    ?start: program
    program: statement*

    ?statement: assign
              | if_stmt
              | while_stmt
              | until_stmt
              | print_stmt
              | input_stmt
              | func_def
              | call
              | return_stmt

    assign: IDENT "=" add
    if_stmt: "if" condition "then" body elseif* [else_clause] "end"
    elseif: "elseif" condition "then" body
    else_clause: "else" body
    while_stmt: "while" condition "do" body "end"
    until_stmt: "until" condition "do" body "end"
    print_stmt: "print" add ("," add)*
    input_stmt: "input" IDENT
    func_def: "func" IDENT "(" [params] ")" body "end"
    params: IDENT ("," IDENT)*
    call: IDENT "(" [args] ")"
    args: add ("," add)*
    return_stmt: "return" add

    body: statement*

    // Expressions: right-recursive chains
    condition: add COMP_OP add [(AND | OR) condition]
    add: mul [(PLUS | MINUS) add]
    mul: value [(STAR | SLASH) mul]
    value: [MINUS] atom [POW NUMBER]
    ?atom: number
         | call
         | variable
         | "(" add ")"
    number: NUMBER
    variable: IDENT

    // Tokens
    COMP_OP: "==" | "!=" | "<=" | ">=" | "<" | ">"
    AND: "and"
    OR: "or"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    POW: "^"
    NUMBER: /(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?/
    IDENT: /[A-Za-z_][A-Za-z0-9_]*/

    %import common.WS
    %ignore WS

    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""


ULANG_PARSER = Lark(
    ULANG_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Program(body=list(items))

    def body(self, items):
        return list(items)

    def assign(self, items):
        return Assign(name=str(items[0]), expr=items[1])

    def if_stmt(self, items):
        condition = items[0]
        body = items[1]
        elseifs = [item for item in items[2:] if isinstance(item, ElseIf)]
        else_body = None
        if len(items) > 2 and isinstance(items[-1], list):
            else_body = items[-1]
        return If(condition, body, elseifs, else_body)

    def elseif(self, items):
        return ElseIf(condition=items[0], body=items[1])

    def else_clause(self, items):
        return items[0]

    def while_stmt(self, items):
        return While(condition=items[0], body=items[1])

    def until_stmt(self, items):
        return Until(condition=items[0], body=items[1])

    def print_stmt(self, items):
        return Print(exprs=list(items))

    def input_stmt(self, items):
        return Input(name=str(items[0]))

    def func_def(self, items):
        name = str(items[0])
        # items: IDENT [params] body
        params: List[str] = items[1] if len(items) == 3 else []
        return FunctionDef(name=name, params=params, body=items[-1])

    def params(self, items):
        return [str(item) for item in items]

    def call(self, items):
        args = items[1] if len(items) > 1 else []
        return FunctionCall(name=str(items[0]), args=args)

    def args(self, items):
        return list(items)

    def return_stmt(self, items):
        return Return(expr=items[0])

    def condition(self, items):
        left, op, right = items[0], str(items[1]), items[2]
        if len(items) > 3:
            return Condition(left, op, right, str(items[3]), items[4])
        return Condition(left, op, right)

    def add(self, items):
        if len(items) == 1:
            return Add(items[0])
        return Add(items[0], str(items[1]), items[2])

    def mul(self, items):
        if len(items) == 1:
            return Mul(items[0])
        return Mul(items[0], str(items[1]), items[2])

    def value(self, items):
        negate = isinstance(items[0], Token) and items[0].type == 'MINUS'
        if negate:
            items = items[1:]
        exponent = None
        if len(items) == 3:
            # atom POW NUMBER
            exponent = float(items[2])
        return Value(items[0], negate, exponent)

    def number(self, items):
        return Number(float(items[0]))

    def variable(self, items):
        return Variable(str(items[0]))


def _describe(token: Token) -> str:
    if token.type == '$END':
        return 'end of input'
    if token.type in ('IDENT', 'NUMBER'):
        return f"{token.type} {str(token)!r}"
    return repr(str(token))


def parse_program_lark(source: str) -> Program:
    """Parse ulang source with the Lark grammar and return a Program AST."""
    try:
        tree = ULANG_PARSER.parse(source)
    except UnexpectedCharacters as e:
        raise LexError(f"unexpected character {e.char!r}", e.line, e.column) from None
    except UnexpectedToken as e:
        raise ParseError(f"unexpected {_describe(e.token)}", max(e.line or 1, 1), max(e.column or 1, 1)) from None
    except UnexpectedInput as e:
        raise ParseError('unexpected end of input', max(e.line or 1, 1), max(e.column or 1, 1)) from None
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        # the transformer wraps errors raised inside rule callbacks
        if isinstance(e.orig_exc, RecursionError):
            raise ResourceExhausted('expression nesting too deep') from None
        raise

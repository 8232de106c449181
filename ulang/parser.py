"""Recursive-descent parser for the ulang language.

One method per grammar production. The only place the parser looks past
the current token is a statement that starts with an identifier: if the
token after it is `=` the statement is an assignment, otherwise it must be
a function call. `Add` and `Mul` chains recurse on their right operand, so
`a - b - c` groups as `a - (b - c)`.

The first syntax error aborts parsing; no partial tree is ever returned.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Program, Assign, If, ElseIf, While, Until, Print, Input, FunctionDef,
    FunctionCall, Return, Condition, Add, Mul, Value, Number, Variable, Node,
)
from .errors import ParseError, ResourceExhausted
from .lexer import Token, tokenize

COMPARISON_OPS = ['==', '!=', '<', '>', '<=', '>=']

# Tokens that can begin a statement; anything else ends a statement list.
STATEMENT_START = frozenset({'IDENT', 'if', 'while', 'until', 'print', 'input', 'func', 'return'})


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def consume(self, expected: Union[str, List[str]]) -> Token:
        token = self.peek()
        if not self.match(expected):
            if isinstance(expected, list):
                wanted = 'one of ' + ', '.join(repr(e) for e in expected)
            else:
                wanted = expected if expected in ('IDENT', 'NUMBER') else repr(expected)
            raise ParseError(f"expected {wanted}, got {token.describe()}", token.line, token.column)
        self.pos += 1
        return token

    def match(self, expected: Union[str, List[str]]) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.type in expected
        return token.type == expected

    def error(self, message: str) -> ParseError:
        token = self.peek()
        return ParseError(f"{message}, got {token.describe()}", token.line, token.column)

    def parse_program(self) -> Program:
        body = self.parse_statement_list()
        if not self.match('EOF'):
            raise self.error('expected a statement')
        return Program(body)

    def parse_statement_list(self) -> List[Node]:
        statements: List[Node] = []
        while self.peek().type in STATEMENT_START:
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'IDENT':
            if self.peek(1).type == '=':
                return self.parse_assign()
            return self.parse_call()
        if token.type == 'if':
            return self.parse_if()
        if token.type == 'while':
            return self.parse_while()
        if token.type == 'until':
            return self.parse_until()
        if token.type == 'print':
            return self.parse_print()
        if token.type == 'input':
            return self.parse_input()
        if token.type == 'func':
            return self.parse_function_def()
        if token.type == 'return':
            return self.parse_return()
        raise self.error('expected a statement')

    def parse_assign(self) -> Assign:
        name = self.consume('IDENT').value
        self.consume('=')
        return Assign(name, self.parse_add())

    def parse_if(self) -> If:
        self.consume('if')
        condition = self.parse_condition()
        self.consume('then')
        body = self.parse_statement_list()
        elseifs: List[ElseIf] = []
        while self.match('elseif'):
            self.consume('elseif')
            elseif_condition = self.parse_condition()
            self.consume('then')
            elseifs.append(ElseIf(elseif_condition, self.parse_statement_list()))
        else_body: Optional[List[Node]] = None
        if self.match('else'):
            self.consume('else')
            else_body = self.parse_statement_list()
        self.consume('end')
        return If(condition, body, elseifs, else_body)

    def parse_while(self) -> While:
        self.consume('while')
        condition = self.parse_condition()
        self.consume('do')
        body = self.parse_statement_list()
        self.consume('end')
        return While(condition, body)

    def parse_until(self) -> Until:
        self.consume('until')
        condition = self.parse_condition()
        self.consume('do')
        body = self.parse_statement_list()
        self.consume('end')
        return Until(condition, body)

    def parse_print(self) -> Print:
        self.consume('print')
        exprs = [self.parse_add()]
        while self.match(','):
            self.consume(',')
            exprs.append(self.parse_add())
        return Print(exprs)

    def parse_input(self) -> Input:
        self.consume('input')
        return Input(self.consume('IDENT').value)

    def parse_function_def(self) -> FunctionDef:
        self.consume('func')
        name = self.consume('IDENT').value
        self.consume('(')
        params: List[str] = []
        if not self.match(')'):
            params.append(self.consume('IDENT').value)
            while self.match(','):
                self.consume(',')
                params.append(self.consume('IDENT').value)
        self.consume(')')
        body = self.parse_statement_list()
        self.consume('end')
        return FunctionDef(name, params, body)

    def parse_call(self) -> FunctionCall:
        name = self.consume('IDENT').value
        self.consume('(')
        args: List[Add] = []
        if not self.match(')'):
            args.append(self.parse_add())
            while self.match(','):
                self.consume(',')
                args.append(self.parse_add())
        self.consume(')')
        return FunctionCall(name, args)

    def parse_return(self) -> Return:
        self.consume('return')
        return Return(self.parse_add())

    # Expressions

    def parse_condition(self) -> Condition:
        left = self.parse_add()
        op = self.consume(COMPARISON_OPS).type
        right = self.parse_add()
        if self.match(['and', 'or']):
            logic = self.consume(['and', 'or']).type
            return Condition(left, op, right, logic, self.parse_condition())
        return Condition(left, op, right)

    def parse_add(self) -> Add:
        left = self.parse_mul()
        if self.match(['+', '-']):
            op = self.consume(['+', '-']).type
            return Add(left, op, self.parse_add())
        return Add(left)

    def parse_mul(self) -> Mul:
        left = self.parse_value()
        if self.match(['*', '/']):
            op = self.consume(['*', '/']).type
            return Mul(left, op, self.parse_mul())
        return Mul(left)

    def parse_value(self) -> Value:
        negate = False
        if self.match('-'):
            self.consume('-')
            negate = True
        token = self.peek()
        if token.type == 'NUMBER':
            self.consume('NUMBER')
            operand: Node = Number(float(token.value))
        elif token.type == 'IDENT':
            if self.peek(1).type == '(':
                operand = self.parse_call()
            else:
                self.consume('IDENT')
                operand = Variable(token.value)
        elif token.type == '(':
            self.consume('(')
            operand = self.parse_add()
            self.consume(')')
        else:
            raise self.error('expected a number, name or (')
        exponent: Optional[float] = None
        if self.match('^'):
            self.consume('^')
            exponent = float(self.consume('NUMBER').value)
        return Value(operand, negate, exponent)


def parse_program(source: str, backend: str = 'descent') -> Program:
    """Parse ulang source into a Program AST.

    `backend` selects the hand-written parser ('descent') or the Lark
    grammar ('lark'); both produce identical trees. Nesting deeper than the
    host recursion limit raises ResourceExhausted.
    """
    try:
        if backend == 'descent':
            return Parser(tokenize(source)).parse_program()
        if backend == 'lark':
            from .grammar import parse_program_lark
            return parse_program_lark(source)
    except RecursionError:
        raise ResourceExhausted('expression nesting too deep') from None
    raise ValueError(f"unknown parser backend {backend!r}")

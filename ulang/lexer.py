"""Tokenizer for the ulang language.

Whitespace, newlines and comments (`// ...` and `/* ... */`) only separate
tokens; the grammar has no statement terminator. Multi-character operators
are matched before their one-character prefixes, and identifiers spelled
like a keyword always become that keyword.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .errors import LexError

KEYWORDS = frozenset({
    'if', 'then', 'elseif', 'else', 'end', 'while', 'do', 'until',
    'print', 'input', 'func', 'return', 'and', 'or',
})

TWO_CHAR_OPS = frozenset({'==', '!=', '<=', '>='})
SINGLE_CHAR_OPS = frozenset({'=', '<', '>', '+', '-', '*', '/', '^', '(', ')', ','})

IDENT_START = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_')
DIGITS = frozenset('0123456789')
WHITESPACE = frozenset(' \t\f\r\n')
IDENT_CHARS = IDENT_START | DIGITS
NUMBER_RE = re.compile(r'(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')


@dataclass(frozen=True)
class Token:
    """A lexical token.

    `type` is 'IDENT', 'NUMBER', 'EOF', or the literal text of a keyword or
    operator (e.g. 'while', '<=', '(').
    """
    type: str
    value: str
    line: int
    column: int

    def describe(self) -> str:
        if self.type == 'EOF':
            return 'end of input'
        if self.type in ('IDENT', 'NUMBER'):
            return f"{self.type} {self.value!r}"
        return repr(self.value)


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with an EOF token."""
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c in WHITESPACE:
            advance()
            continue
        # Comments
        if c == '/' and i + 1 < length and source[i + 1] == '/':
            while i < length and source[i] != '\n':
                advance()
            continue
        if c == '/' and i + 1 < length and source[i + 1] == '*':
            start_line, start_col = line, col
            end = source.find('*/', i + 2)
            if end == -1:
                raise LexError('unterminated block comment', start_line, start_col)
            advance(end + 2 - i)
            continue
        # Identifiers or keywords
        if c in IDENT_START:
            start_col = col
            start_i = i
            while i < length and source[i] in IDENT_CHARS:
                advance()
            value = source[start_i:i]
            kind = value if value in KEYWORDS else 'IDENT'
            tokens.append(Token(kind, value, line, start_col))
            continue
        # Numbers
        if c in DIGITS or (c == '.' and source[i + 1:i + 2] in DIGITS):
            m = NUMBER_RE.match(source, i)
            tokens.append(Token('NUMBER', m.group(0), line, col))
            advance(m.end() - i)
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPS:
            tokens.append(Token(pair, pair, line, col))
            advance(2)
            continue
        if c in SINGLE_CHAR_OPS:
            tokens.append(Token(c, c, line, col))
            advance()
            continue
        raise LexError(f"unexpected character {c!r}", line, col)
    tokens.append(Token('EOF', '', line, col))
    return tokens

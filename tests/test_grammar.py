from pathlib import Path

import pytest

from ulang.errors import LexError, ParseError
from ulang.grammar import parse_program_lark
from ulang.parser import parse_program

SNIPPETS = [
    '',
    'x = 1 f(x, 2) g()',
    'x = 10 - 4 - 3 y = 8 / 4 / 2 z = 1 + 2 * 3',
    'x = -(a + 1)^2 y = -f(1)^3 z = .5e1',
    'if a == 1 then print 1 elseif a == 2 then elseif a == 3 then print 3 else print 0 end',
    'if 1 < 2 then end if 1 < 2 then else end',
    'while a < 1 and b > 2 or c != 3 do a = a + 1 end',
    'until n >= 0 do input n end',
    'func sq(n) return n * n end func nothing() end print sq(2), nothing()',
    'x = 1 /* block\ncomment */ print x // tail',
    'ending = 1 iffy = ending',
]


@pytest.mark.parametrize('source', SNIPPETS)
def test_backends_build_identical_trees(source):
    assert parse_program_lark(source) == parse_program(source)


def test_backends_agree_on_example_programs():
    for path in sorted(Path('examples').glob('*.ul')):
        source = path.read_text(encoding='utf-8')
        assert parse_program(source, backend='lark') == parse_program(source), path.name


@pytest.mark.parametrize('source', [
    'x = ',
    'if 1 then end',
    'x + 1',
    'while 1 < 2 do',
    'x = 2 ^ y',
    'input end',
    'print 1\nend',
])
def test_syntax_errors(source):
    with pytest.raises(ParseError):
        parse_program_lark(source)


def test_error_line_is_reported():
    with pytest.raises(ParseError) as exc:
        parse_program_lark('x = 1\nprint 2\nthen')
    assert exc.value.line == 3


def test_unknown_character():
    with pytest.raises(LexError) as exc:
        parse_program_lark('x = 1\ny = $')
    assert (exc.value.line, exc.value.column) == (2, 5)


@pytest.mark.parametrize('backend', ['descent', 'lark'])
def test_backends_share_whitespace_rules(backend):
    assert parse_program('x\t=\f1\r\n', backend) == parse_program('x = 1')
    with pytest.raises(LexError):
        parse_program('x =\u00a01', backend)

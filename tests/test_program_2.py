from ulang.interpreter import Interpreter
from ulang.parser import parse_program


def test_program_2_else_branch(capsys):
    with open('examples/program_2.ul', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out
    assert out == '1\n'

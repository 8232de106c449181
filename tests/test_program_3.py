from ulang.interpreter import Interpreter
from ulang.parser import parse_program


def test_program_3_loops(capsys):
    with open('examples/program_3.ul', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['3', '5 15']
    assert interp.globals['x'] == 3

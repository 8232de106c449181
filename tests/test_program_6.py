import builtins
from ulang.interpreter import Interpreter
from ulang.parser import parse_program


def test_program_6_input(monkeypatch, capsys):
    """Test program 6: reads a count and prints each number with its square.

    We simulate user input to supply the count and verify that the output
    matches the expected sequence of lines.
    """
    monkeypatch.setattr(builtins, 'input', lambda prompt='': ' 3 ')
    with open('examples/program_6.ul', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['1 1', '2 4', '3 9']

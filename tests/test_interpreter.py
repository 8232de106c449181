import io

import pytest

from ulang.interpreter import Interpreter, run_program
from ulang.parser import parse_program


def output(source, capsys, **kwargs):
    run_program(source, **kwargs)
    return capsys.readouterr().out


@pytest.mark.parametrize('expr, expected', [
    ('1 + 2 * 3', '7'),
    ('2 * 3 + 1', '7'),
    ('8 / 4 / 2', '4'),
    ('10 - 4 - 3', '9'),
    ('2 - 3 + 4', '-5'),
    ('12 / 2 * 3', '2'),
    ('(8 / 4) / 2', '1'),
    ('2 ^ 3', '8'),
    ('-2^2', '-4'),
    ('(-2)^2', '4'),
    ('2 ^ 0.5 * 2 ^ 0.5', '2.0000000000000004'),
    ('1 / 4', '0.25'),
    ('-3 * -3', '9'),
    ('1e3 + .5', '1000.5'),
])
def test_expression_values(capsys, expr, expected):
    assert output(f'print {expr}', capsys) == expected + '\n'


def test_print_separates_values_with_single_spaces(capsys):
    assert output('a = 1 b = 2 c = 3 print a, b, c', capsys) == '1 2 3\n'


def test_each_print_is_one_line(capsys):
    assert output('print 1 print 2.5, -1', capsys) == '1\n2.5 -1\n'


def test_if_takes_first_true_branch_only(capsys):
    source = '''
        x = 2
        if x == 1 then print 1
        elseif x > 1 then print 2
        elseif x > 0 then print 3
        else print 4
        end
        if x < 0 then print 5 end
    '''
    assert output(source, capsys) == '2\n'


@pytest.mark.parametrize('cond, expected', [
    ('1 < 2 and 2 < 3', '1'),
    ('1 < 2 and 3 < 2', '0'),
    ('1 > 2 or 2 < 3', '1'),
    ('1 > 2 or 3 < 2', '0'),
    # right grouping: 1 > 2 and (2 > 3 or 1 == 1)
    ('1 > 2 and 2 > 3 or 1 == 1', '0'),
    ('1 == 1 or 2 > 3 and 1 > 2', '1'),
    ('1 <= 1 and 2 >= 2 and 3 != 4', '1'),
])
def test_boolean_connectives(capsys, cond, expected):
    source = f'if {cond} then print 1 else print 0 end'
    assert output(source, capsys) == expected + '\n'


def test_until_runs_while_condition_is_false(capsys):
    source = '''
        x = 0
        n = 0
        until x == 3 do
            x = x + 1
            n = n + 1
        end
        print x, n
    '''
    assert output(source, capsys) == '3 3\n'


def test_loops_that_never_run(capsys):
    source = 'x = 5 while x < 0 do print x end until x == 5 do print x end print 0'
    assert output(source, capsys) == '0\n'


def test_function_without_return_yields_zero(capsys):
    source = 'func noop(a) b = a end print noop(4) noop(1)'
    assert output(source, capsys) == '0\n'


def test_return_inside_nested_block_ends_the_call(capsys):
    source = '''
        func first_over(limit)
            i = 0
            while 1 == 1 do
                i = i + 1
                if i * i > limit then
                    return i
                end
            end
            print 999
        end
        print first_over(50)
    '''
    assert output(source, capsys) == '8\n'


def test_nested_calls_keep_outer_frame_inside_function(capsys):
    source = '''
        func g(x) return x * 2 end
        func f(x)
            y = g(x)
            z = g(y)
            return y + z
        end
        print f(1)
    '''
    assert output(source, capsys) == '6\n'


def test_arguments_are_evaluated_in_callers_scope(capsys):
    source = '''
        func inner(a) return a end
        func outer(a)
            b = a + 1
            return inner(b * 10)
        end
        a = 100
        print outer(1), a
    '''
    assert output(source, capsys) == '20 100\n'


def test_callee_cannot_see_caller_locals(capsys):
    from ulang.errors import UndefinedVariable
    source = '''
        func peek() return secret end
        func caller() secret = 1 return peek() end
        print caller()
    '''
    with pytest.raises(UndefinedVariable):
        run_program(source)


def test_functions_read_globals_but_write_locals(capsys):
    source = '''
        g = 5
        func bump() g = g + 1 return g end
        print bump(), bump(), g
    '''
    interp = run_program(source)
    assert capsys.readouterr().out == '6 6 5\n'
    assert interp.globals == {'g': 5.0}


def test_redefinition_overwrites(capsys):
    source = '''
        func f() return 1 end
        print f()
        func f() return 2 end
        print f()
    '''
    assert output(source, capsys) == '1\n2\n'


def test_definition_does_not_run_body(capsys):
    assert output('func loud() print 1 end print 2', capsys) == '2\n'


def test_recursion(capsys):
    source = '''
        func fact(n)
            if n <= 1 then return 1 end
            return n * fact(n - 1)
        end
        print fact(15)
    '''
    assert output(source, capsys) == '1307674368000\n'


def test_deep_recursion_within_limit(capsys):
    source = '''
        func depth(n)
            if n == 0 then return 0 end
            return 1 + depth(n - 1)
        end
        print depth(150)
    '''
    assert output(source, capsys) == '150\n'


def test_input_from_stream(capsys):
    source = 'input a input b print a + b'
    assert output(source, capsys, stdin=io.StringIO('  2\n3.5\n')) == '5.5\n'


def test_input_inside_function_binds_locally(capsys):
    source = 'func ask() input v return v * 2 end print ask() v = 1 print v'
    assert output(source, capsys, stdin=io.StringIO('21\n')) == '42\n1\n'


def test_custom_stdout():
    out = io.StringIO()
    run_program('print 1, 2', stdout=out)
    assert out.getvalue() == '1 2\n'


def test_globals_persist_across_runs(capsys):
    interp = Interpreter()
    interp.run(parse_program('x = 1 func inc(v) return v + 1 end'))
    interp.run(parse_program('print inc(x)'))
    assert capsys.readouterr().out == '2\n'


def test_debug_trace(tmp_path, capsys):
    debug_file = tmp_path / 'trace.txt'
    source = 'func sq(n) return n * n end x = sq(3) if x > 1 then print x end'
    run_program(source, debug_level=3, debug_file=str(debug_file))
    trace = debug_file.read_text().splitlines()
    assert 'define function sq(n)' in trace
    assert 'call sq(3) depth 1' in trace
    assert 'return sq -> 9' in trace
    assert 'assign x = 9 (depth 0)' in trace
    assert 'if condition -> True' in trace
    assert capsys.readouterr().out == '9\n'


def test_debug_level_one_skips_assignments(tmp_path, capsys):
    debug_file = tmp_path / 'trace.txt'
    run_program('func f() return 1 end x = f()', debug_level=1, debug_file=str(debug_file))
    trace = debug_file.read_text().splitlines()
    assert trace == ['call f() depth 1', 'return f -> 1']

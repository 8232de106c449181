# ulang package
# A lexer, parser and tree-walking interpreter for the ulang scripting language.
from .errors import UlangError
from .interpreter import run_program, run_file, Interpreter
from .parser import parse_program

__all__ = [
    'parse_program',
    'run_program',
    'run_file',
    'Interpreter',
    'UlangError',
]

class UlangError(Exception):
    """Base class for every fatal error raised while lexing, parsing or running."""
    name = 'UlangError'

    def __init__(self, message: str):
        super().__init__(f"{self.name}: {message}")
        self.message = message


class LexError(UlangError):
    """Unrecognized character in the source text."""
    name = 'LexError'

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column


class ParseError(UlangError):
    """Grammar violation; carries the position of the offending token."""
    name = 'ParseError'

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column


class UndefinedVariable(UlangError):
    name = 'UndefinedVariable'


class UndefinedFunction(UlangError):
    name = 'UndefinedFunction'


class ArityMismatch(UlangError):
    name = 'ArityMismatch'


class ReturnOutsideFunction(UlangError):
    name = 'ReturnOutsideFunction'


class InputError(UlangError):
    name = 'InputError'


class DivisionByZero(UlangError):
    name = 'DivisionByZero'


class ResourceExhausted(UlangError):
    name = 'ResourceExhausted'


class ReturnSignal:
    """Produced by a `return` statement to unwind the enclosing function body."""
    def __init__(self, value: float):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"

"""Tree-walking interpreter for the ulang language.

The interpreter owns the global environment and the function table for the
whole run. Each call gets its own `Environment` carrying the call depth,
and every evaluation method receives the active environment explicitly.
A `return` statement produces a `ReturnSignal` that each enclosing block
hands straight back to its caller until `call_function` unwraps it.
"""

from __future__ import annotations

import sys
import threading
from typing import Dict, List, Optional, TextIO, Union

from .ast import (
    Program, Assign, If, While, Until, Print, Input, FunctionDef,
    FunctionCall, Return, Condition, Add, Mul, Value, Number, Variable, Node,
)
from .environment import Environment
from .errors import (
    ArityMismatch, DivisionByZero, InputError, ResourceExhausted,
    ReturnOutsideFunction, ReturnSignal, UndefinedFunction,
)
from .parser import parse_program
from .values import format_number, parse_number, power

# Python frames used per ulang call, with room for nested blocks and
# expressions; run() raises the recursion limit to fit max_depth calls.
_FRAMES_PER_CALL = 24
# Worker thread stack reserved per ulang call, plus a fixed base.
_STACK_BYTES_PER_CALL = 64 * 1024
_STACK_BASE_BYTES = 16 * 1024 * 1024

DEFAULT_MAX_DEPTH = 4000


class Interpreter:
    """Core interpreter that executes a ulang AST."""
    def __init__(
        self,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
        max_depth: int = DEFAULT_MAX_DEPTH,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.global_env = Environment()
        self.functions: Dict[str, FunctionDef] = {}
        self.max_depth = max_depth
        self.stdin = stdin
        self.stdout = stdout
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    @property
    def globals(self) -> Dict[str, float]:
        return self.global_env.values

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    # Public API
    def run(self, program: Program):
        """Execute `program` on a worker thread sized for `max_depth` calls."""
        failure: List[Exception] = []

        def evaluate():
            try:
                self.execute_block(program.body, self.global_env)
            except RecursionError:
                failure.append(ResourceExhausted('maximum recursion depth exceeded'))
            except Exception as e:
                failure.append(e)

        old_limit = sys.getrecursionlimit()
        old_stack = threading.stack_size()
        sys.setrecursionlimit(max(old_limit, self.max_depth * _FRAMES_PER_CALL + 200))
        threading.stack_size(self.max_depth * _STACK_BYTES_PER_CALL + _STACK_BASE_BYTES)
        try:
            worker = threading.Thread(target=evaluate, name='ulang-run')
            worker.start()
            worker.join()
        finally:
            threading.stack_size(old_stack)
            sys.setrecursionlimit(old_limit)
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None
        if failure:
            raise failure[0]

    def execute_block(self, statements: List[Node], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Node, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, Assign):
            value = self.evaluate_add(node.expr, env)
            env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {format_number(value)} (depth {env.depth})")
            return None
        if isinstance(node, If):
            truthy = self.evaluate_condition(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {truthy}")
            if truthy:
                return self.execute_block(node.body, env)
            for branch in node.elseifs:
                truthy = self.evaluate_condition(branch.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"elseif condition -> {truthy}")
                if truthy:
                    return self.execute_block(branch.body, env)
            if node.else_body is not None:
                return self.execute_block(node.else_body, env)
            return None
        if isinstance(node, While):
            while True:
                truthy = self.evaluate_condition(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition -> {truthy}")
                if not truthy:
                    break
                res = self.execute_block(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, Until):
            while True:
                done = self.evaluate_condition(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"until condition -> {done}")
                if done:
                    break
                res = self.execute_block(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, Print):
            values = [self.evaluate_add(expr, env) for expr in node.exprs]
            out = self.stdout if self.stdout is not None else sys.stdout
            print(' '.join(format_number(v) for v in values), file=out)
            return None
        if isinstance(node, Input):
            value = self.read_number()
            env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"input {node.name} = {format_number(value)}")
            return None
        if isinstance(node, FunctionDef):
            self.functions[node.name] = node
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return None
        if isinstance(node, FunctionCall):
            self.call_function(node, env)
            return None
        if isinstance(node, Return):
            if not env.in_function:
                raise ReturnOutsideFunction('return cannot be used outside of a function')
            return ReturnSignal(self.evaluate_add(node.expr, env))
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def read_number(self) -> float:
        try:
            if self.stdin is not None:
                line = self.stdin.readline()
                if line == '':
                    raise EOFError
            else:
                line = input()
        except EOFError:
            raise InputError('unexpected end of input stream') from None
        except OSError as e:
            raise InputError(f"cannot read input: {e}") from None
        try:
            return parse_number(line)
        except ValueError:
            raise InputError(f"cannot parse number from {line.strip()!r}") from None

    def call_function(self, call: FunctionCall, env: Environment) -> float:
        func = self.functions.get(call.name)
        if func is None:
            raise UndefinedFunction(f"'{call.name}' is not a function")
        if len(call.args) != len(func.params):
            raise ArityMismatch(
                f"function '{call.name}' expects {len(func.params)} arguments, got {len(call.args)}"
            )
        if env.depth >= self.max_depth:
            raise ResourceExhausted(f"maximum call depth {self.max_depth} exceeded in '{call.name}'")
        # Arguments are evaluated in the caller's scope before the callee's exists
        args = [self.evaluate_add(arg, env) for arg in call.args]
        call_env = env.child(dict(zip(func.params, args)))
        if self.debug_level >= 1:
            shown = ', '.join(format_number(a) for a in args)
            self.debug(f"call {call.name}({shown}) depth {call_env.depth}")
        res = self.execute_block(func.body, call_env)
        ret_val = res.value if isinstance(res, ReturnSignal) else 0.0
        if self.debug_level >= 1:
            self.debug(f"return {call.name} -> {format_number(ret_val)}")
        return ret_val

    # Expressions

    def evaluate_condition(self, node: Condition, env: Environment) -> bool:
        a = self.evaluate_add(node.left, env)
        b = self.evaluate_add(node.right, env)
        result = compare(node.op, a, b)
        if node.rest is None:
            return result
        more = self.evaluate_condition(node.rest, env)
        if node.logic == 'and':
            return result and more
        return result or more

    def evaluate_add(self, node: Add, env: Environment) -> float:
        value = self.evaluate_mul(node.left, env)
        if node.right is None:
            return value
        rest = self.evaluate_add(node.right, env)
        if node.op == '+':
            return value + rest
        return value - rest

    def evaluate_mul(self, node: Mul, env: Environment) -> float:
        value = self.evaluate_value(node.left, env)
        if node.right is None:
            return value
        rest = self.evaluate_mul(node.right, env)
        if node.op == '*':
            return value * rest
        if rest == 0:
            raise DivisionByZero(f"division of {format_number(value)} by zero")
        return value / rest

    def evaluate_value(self, node: Value, env: Environment) -> float:
        operand: Union[Number, Variable, FunctionCall, Add] = node.operand
        if isinstance(operand, Number):
            value = operand.value
        elif isinstance(operand, Variable):
            value = env.get(operand.name)
        elif isinstance(operand, FunctionCall):
            value = self.call_function(operand, env)
        elif isinstance(operand, Add):
            value = self.evaluate_add(operand, env)
        else:
            raise NotImplementedError(f"evaluate: unexpected operand {type(operand).__name__}")
        if node.exponent is not None:
            value = power(value, node.exponent)
        if node.negate:
            value = -value
        return value


def compare(op: str, a: float, b: float) -> bool:
    if op == '==':
        return a == b
    if op == '!=':
        return a != b
    if op == '<':
        return a < b
    if op == '>':
        return a > b
    if op == '<=':
        return a <= b
    if op == '>=':
        return a >= b
    raise ValueError(f"unknown comparison operator {op!r}")


def run_program(source: str, backend: str = 'descent', **kwargs) -> Interpreter:
    """Parse and run a ulang program from a source string.

    Keyword arguments are passed to `Interpreter`. Returns the interpreter
    so callers can inspect the final global state.
    """
    ast_program = parse_program(source, backend)
    interpreter = Interpreter(**kwargs)
    interpreter.run(ast_program)
    return interpreter


def run_file(file_path: str, backend: str = 'descent', **kwargs) -> Interpreter:
    """Parse and run a ulang source file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, backend, **kwargs)

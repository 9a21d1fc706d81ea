"""Tree-walking interpreter for BrnoScript.

The interpreter evaluates the statement list produced by the parser
directly, with no intermediate form. Evaluation is asynchronous from top
to bottom: builtins that sleep, hash or touch the filesystem, and the
loader behind `vokno`, may suspend, and the program resumes at the next
step once they finish. One program still runs strictly in order.

Statement execution returns an outcome instead of raising for control
flow: None when control falls through, or a ReturnSignal, BREAK or
CONTINUE marker that the enclosing function call or loop consumes.
Errors, whether raised by the runtime or thrown by a script, travel as
BrnoError exceptions and are only intercepted by `chyť`.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Dict, List, Optional

from .ast import (
    Assign, Binary, Block, Break, Call, Continue, Expr, ExprStmt, For,
    FunctionDecl, FunctionExpr, Get, If, Import, Let, Literal, Postfix,
    Return, Stmt, Try, Unary, Variable, While,
)
from .capabilities import Capabilities, Compiler, Loader
from .environment import Environment
from .errors import (
    BREAK, CONTINUE, BreakSignal, BrnoError, ContinueSignal, LexerError,
    Outcome, ParseError, ReturnSignal,
)
from .parser import parse_program
from .std import install_builtins
from .types import (
    CallableValue, ErrorVal, divide, is_truthy, modulo, power,
    strict_equals, to_number, to_string, type_name,
)


# Each script-level call nests several coroutine frames.
MAX_RECURSION = 20000


class FunctionValue(CallableValue):
    """Represents a user-defined BrnoScript function."""
    def __init__(self, name: str, params: List[str], body: List[Stmt], closure: Environment):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure  # the defining environment

    @property
    def arity(self) -> int:
        return len(self.params)

    async def call(self, interp: 'Interpreter', args: List[Any]) -> Any:
        call_env = Environment(parent=self.closure)
        # Missing arguments bind to null; extras are ignored. Arity is
        # enforced by the call expression, not here.
        for index, param in enumerate(self.params):
            call_env.define(param, args[index] if index < len(args) else None)
        outcome = await interp.execute_block(self.body, call_env)
        if isinstance(outcome, ReturnSignal):
            return outcome.value
        if outcome is not None:
            raise control_error(outcome)
        return None

    def __repr__(self) -> str:
        return f"<rob {self.name}>"


def control_error(outcome: Outcome) -> BrnoError:
    if isinstance(outcome, ReturnSignal):
        message = "'vrat' outside a function"
    elif isinstance(outcome, BreakSignal):
        message = "'vypadni' outside a loop"
    else:
        message = "'přeskoč' outside a loop"
    return BrnoError(ErrorVal('ControlError', message))


class Interpreter:
    """Core interpreter that executes BrnoScript statements.

    The global environment is created once and outlives individual
    `run` calls, so a REPL or a series of imports share it.
    """
    def __init__(
        self,
        loader: Optional[Loader] = None,
        capabilities: Optional[Capabilities] = None,
        compile: Optional[Compiler] = None,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
        argv: Optional[List[str]] = None,
    ):
        self.global_env = Environment()
        self.loader = loader
        self.capabilities = capabilities or Capabilities()
        self.compile = compile
        self.argv = list(sys.argv[1:] if argv is None else argv)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        if sys.getrecursionlimit() < MAX_RECURSION:
            sys.setrecursionlimit(MAX_RECURSION)
        install_builtins(self)

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    async def run(self, statements: List[Stmt]) -> None:
        if self.debug_level >= 1:
            self.debug(f"run {len(statements)} statements")
        outcome = await self.execute_block(statements, self.global_env)
        if outcome is not None:
            raise control_error(outcome)

    async def call_value(self, callee: Any, args: List[Any]) -> Any:
        """Call `callee` the way a call expression does, checking arity."""
        if not isinstance(callee, CallableValue):
            raise BrnoError(ErrorVal('TypeError', f"only functions can be called, got {type_name(callee)}"))
        if callee.arity is not None and callee.arity != len(args):
            raise BrnoError(ErrorVal(
                'ArityError', f"{callee.name}: expected {callee.arity} arguments, got {len(args)}"))
        if self.debug_level >= 3:
            self.debug(f"call {callee!r} with {len(args)} arguments")
        try:
            return await callee.call(self, args)
        except RecursionError as e:
            raise BrnoError(ErrorVal('RangeError', 'maximum call depth exceeded')) from e

    async def invoke(self, callee: Any, args: List[Any]) -> Any:
        """Call `callee` without an arity check; used for builtin callbacks."""
        if not isinstance(callee, CallableValue):
            raise BrnoError(ErrorVal('TypeError', f"only functions can be called, got {type_name(callee)}"))
        try:
            return await callee.call(self, args)
        except RecursionError as e:
            raise BrnoError(ErrorVal('RangeError', 'maximum call depth exceeded')) from e

    # Statements

    async def execute_block(self, statements: List[Stmt], env: Environment) -> Outcome:
        for stmt in statements:
            outcome = await self.execute(stmt, env)
            if outcome is not None:
                return outcome
        return None

    async def execute(self, node: Stmt, env: Environment) -> Outcome:
        if self.debug_level >= 4:
            self.debug(f"line {node.line}: {type(node).__name__}")
        try:
            return await self.execute_node(node, env)
        except BrnoError as ex:
            if ex.line is None and node.line:
                ex.line = node.line
            raise

    async def execute_node(self, node: Stmt, env: Environment) -> Outcome:
        if isinstance(node, ExprStmt):
            await self.evaluate(node.expr, env)
            return None
        if isinstance(node, Let):
            value = await self.evaluate(node.init, env) if node.init is not None else None
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            return await self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, If):
            cond = await self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return await self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return await self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            while is_truthy(await self.evaluate(node.condition, env)):
                outcome = await self.execute(node.body, env)
                if isinstance(outcome, BreakSignal):
                    break
                if outcome is not None and not isinstance(outcome, ContinueSignal):
                    return outcome
            return None
        if isinstance(node, For):
            loop_env = Environment(parent=env)
            if node.init is not None:
                await self.execute(node.init, loop_env)
            while node.condition is None or is_truthy(await self.evaluate(node.condition, loop_env)):
                outcome = await self.execute(node.body, loop_env)
                if isinstance(outcome, BreakSignal):
                    break
                if outcome is not None and not isinstance(outcome, ContinueSignal):
                    return outcome
                # `přeskoč` lands here too: the step always runs before the next test
                if node.step is not None:
                    await self.evaluate(node.step, loop_env)
            return None
        if isinstance(node, FunctionDecl):
            env.define(node.name, FunctionValue(node.name, node.params, node.body, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return None
        if isinstance(node, Return):
            value = await self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, Break):
            return BREAK
        if isinstance(node, Continue):
            return CONTINUE
        if isinstance(node, Import):
            return await self.import_module(node, env)
        if isinstance(node, Try):
            return await self.execute_try(node, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    async def execute_try(self, node: Try, env: Environment) -> Outcome:
        outcome: Outcome = None
        pending: Optional[BrnoError] = None
        try:
            outcome = await self.execute_block(node.body, Environment(parent=env))
        except BrnoError as ex:
            if node.handler is None:
                pending = ex
            else:
                catch_env = Environment(parent=env)
                if node.name is not None:
                    catch_env.define(node.name, ex.value)
                try:
                    outcome = await self.execute_block(node.handler, catch_env)
                except BrnoError as inner:
                    pending = inner
        if node.finalizer is not None:
            final_outcome = await self.execute_block(node.finalizer, Environment(parent=env))
            # a signal raised by `potom` replaces whatever was pending
            if final_outcome is not None:
                return final_outcome
        if pending is not None:
            raise pending
        return outcome

    async def import_module(self, node: Import, env: Environment) -> Outcome:
        if self.loader is None:
            raise BrnoError(ErrorVal('ImportError', 'imports are unavailable: no loader configured'))
        path = await self.evaluate(node.path, env)
        if not isinstance(path, str):
            raise BrnoError(ErrorVal('TypeError', f"'vokno' expects a string path, got {type_name(path)}"))
        if self.debug_level >= 1:
            self.debug(f"import {path}")
        try:
            source = await self.loader(path)
        except BrnoError:
            raise
        except Exception as e:
            raise BrnoError(ErrorVal('ImportError', f"cannot load '{path}': {e}")) from e
        if self.compile is None:
            raise BrnoError(ErrorVal('ImportError', 'no compile function configured'))
        try:
            statements = self.compile(source)
        except (LexerError, ParseError) as e:
            raise BrnoError(ErrorVal('SyntaxError', f"{path}: {e}")) from e
        # Imported statements run in the importing scope, not a module scope.
        return await self.execute_block(statements, env)

    # Expressions

    async def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = await self.evaluate(node.value, env)
            env.set(node.name, value)
            return value
        if isinstance(node, Binary):
            return await self.evaluate_binary(node, env)
        if isinstance(node, Unary):
            operand = await self.evaluate(node.operand, env)
            if node.op == '!':
                return not is_truthy(operand)
            if node.op == '-':
                return -to_number(operand)
            raise BrnoError(ErrorVal('TypeError', f"unsupported unary operator {node.op}"))
        if isinstance(node, Call):
            callee = await self.evaluate(node.callee, env)
            args: List[Any] = []
            for arg in node.args:
                args.append(await self.evaluate(arg, env))
            return await self.call_value(callee, args)
        if isinstance(node, Postfix):
            current = env.get(node.name)
            delta = 1.0 if node.op == '++' else -1.0
            env.set(node.name, to_number(current) + delta)
            return current
        if isinstance(node, Get):
            target = await self.evaluate(node.obj, env)
            if target is None:
                raise BrnoError(ErrorVal('TypeError', f"cannot read member '{node.name}' of null"))
            return self.get_member(target, node.name)
        if isinstance(node, FunctionExpr):
            return FunctionValue('<anon>', node.params, node.body, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    async def evaluate_binary(self, node: Binary, env: Environment) -> Any:
        left = await self.evaluate(node.left, env)
        # short-circuit operators yield an operand, not a boolean
        if node.op == '&&':
            return await self.evaluate(node.right, env) if is_truthy(left) else left
        if node.op == '||':
            return left if is_truthy(left) else await self.evaluate(node.right, env)
        if node.op == '??':
            return await self.evaluate(node.right, env) if left is None else left
        right = await self.evaluate(node.right, env)
        return self.apply_binary_op(node.op, left, right)

    def apply_binary_op(self, op: str, left: Any, right: Any) -> Any:
        if op == '+':
            if isinstance(left, str) or isinstance(right, str):
                return to_string(left) + to_string(right)
            return to_number(left) + to_number(right)
        if op == '==':
            return strict_equals(left, right)
        if op == '!=':
            return not strict_equals(left, right)
        a, b = to_number(left), to_number(right)
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            return divide(a, b)
        if op == '%':
            return modulo(a, b)
        if op == '**':
            return power(a, b)
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        raise BrnoError(ErrorVal('TypeError', f"unknown operator {op}"))

    def get_member(self, target: Any, name: str) -> Any:
        if isinstance(target, dict):
            return target.get(name)
        if isinstance(target, (list, str)) and name == 'length':
            return float(len(target))
        if isinstance(target, ErrorVal) and name in ('name', 'message'):
            return getattr(target, name)
        return None

    @property
    def globals(self) -> Dict[str, Any]:
        return self.global_env.values


async def run_source(
    source: str,
    loader: Optional[Loader] = None,
    capabilities: Optional[Capabilities] = None,
    debug_level: int = 0,
) -> Interpreter:
    """Compile and run a BrnoScript program in a fresh interpreter."""
    statements = parse_program(source)
    interpreter = Interpreter(loader=loader, capabilities=capabilities, compile=parse_program, debug_level=debug_level)
    try:
        await interpreter.run(statements)
    finally:
        interpreter.close()
    return interpreter


def run_program(
    source: str,
    loader: Optional[Loader] = None,
    capabilities: Optional[Capabilities] = None,
    debug_level: int = 0,
) -> Interpreter:
    """Blocking convenience wrapper around `run_source`."""
    return asyncio.run(run_source(source, loader=loader, capabilities=capabilities, debug_level=debug_level))

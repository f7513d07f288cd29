"""The ``expect`` primitive and its failure signal.

``expect`` checks a value for truthiness. On failure it raises
:class:`ExpectationFailed`, an ``AssertionError`` that carries the source text
of the checked expression and the values of the names it references, read
from the caller's frame.
"""

from __future__ import annotations

import ast
import inspect
import linecache
import logging
import textwrap
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import FrameType
from typing import Any

from lazyspec.context import TEST_CONTEXT


logger = logging.getLogger(__name__)

UNKNOWN_EXPRESSION = "<expression>"


@dataclass(frozen=True)
class ExpressionRepr:
    """Source text of an expression and the values of names used in it."""

    expr: str
    resolved: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if not self.resolved:
            return self.expr
        values = ", ".join(f"{k}={v!r}" for k, v in self.resolved.items())
        return f"{self.expr} where {values}"


@dataclass
class ExpectationResult:
    """Outcome of a single ``expect`` call."""

    expression_repr: ExpressionRepr
    passed: bool
    message: str | None = None


class ExpectationFailed(AssertionError):
    """AssertionError with attached ExpectationResult."""

    def __init__(self, result: ExpectationResult) -> None:
        self.result = result
        message = f"Expected {result.expression_repr}"
        if result.message:
            message += f": {result.message}"
        super().__init__(message)

    @property
    def expression(self) -> str:
        return self.result.expression_repr.expr

    @property
    def resolved(self) -> dict[str, Any]:
        return self.result.expression_repr.resolved


def _parse_fragment(source: str) -> tuple[ast.AST, str] | None:
    """Parse a source fragment, trimming trailing characters until it parses."""
    src = textwrap.dedent(source).strip()
    while src:
        try:
            return ast.parse(src), src
        except SyntaxError:
            src = src[:-1].rstrip()
    return None


def _names_in(node: ast.AST) -> list[str]:
    names: list[str] = []
    for sub in ast.walk(node):
        if isinstance(sub, ast.Name) and isinstance(sub.ctx, ast.Load) and sub.id not in names:
            names.append(sub.id)
    return names


def _resolve_names(names: list[str], *scopes: Mapping[str, Any]) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    for name in names:
        for scope in scopes:
            if name in scope:
                value = scope[name]
                if not (inspect.ismodule(value) or inspect.isroutine(value) or inspect.isclass(value)):
                    resolved[name] = value
                break
    return resolved


def _is_expect_call(node: ast.AST) -> bool:
    if not isinstance(node, ast.Call) or not node.args:
        return False
    func = node.func
    return (isinstance(func, ast.Name) and func.id == "expect") or (
        isinstance(func, ast.Attribute) and func.attr == "expect"
    )


def repr_from_frame(frame: FrameType) -> ExpressionRepr:
    """Describe the first argument of the ``expect`` call on ``frame``'s line."""
    line = linecache.getline(frame.f_code.co_filename, frame.f_lineno)
    parsed = _parse_fragment(line) if line else None
    if parsed is None:
        return ExpressionRepr(UNKNOWN_EXPRESSION)

    tree, src = parsed
    for node in ast.walk(tree):
        if _is_expect_call(node):
            arg = node.args[0]
            text = ast.get_source_segment(src, arg) or ast.unparse(arg)
            resolved = _resolve_names(_names_in(arg), frame.f_locals, frame.f_globals)
            return ExpressionRepr(text, resolved)
    return ExpressionRepr(UNKNOWN_EXPRESSION)


def repr_from_callable(fn: Callable[..., Any]) -> ExpressionRepr:
    """Describe the body of a lambda, or name a regular function.

    The resolved mapping holds closure values; call-time arguments are added
    by :func:`with_arguments`.
    """
    if getattr(fn, "__name__", None) != "<lambda>":
        return ExpressionRepr(f"{getattr(fn, '__qualname__', repr(fn))}()")

    try:
        source = inspect.getsource(fn)
    except (OSError, TypeError):
        return ExpressionRepr(UNKNOWN_EXPRESSION)

    parsed = _parse_fragment(source)
    if parsed is None:
        return ExpressionRepr(UNKNOWN_EXPRESSION)

    tree, src = parsed
    code = fn.__code__
    arg_names = list(code.co_varnames[: code.co_argcount + code.co_kwonlyargcount])
    lambdas = [node for node in ast.walk(tree) if isinstance(node, ast.Lambda)]
    if not lambdas:
        return ExpressionRepr(UNKNOWN_EXPRESSION)
    target = next(
        (lam for lam in lambdas if [a.arg for a in lam.args.args + lam.args.kwonlyargs] == arg_names),
        lambdas[0],
    )
    text = ast.get_source_segment(src, target.body) or ast.unparse(target.body)
    closure = inspect.getclosurevars(fn)
    resolved = _resolve_names(_names_in(target.body), closure.nonlocals, closure.globals)
    return ExpressionRepr(text, resolved)


def with_arguments(expression: ExpressionRepr, arguments: Mapping[str, Any]) -> ExpressionRepr:
    """Add call-time argument values to an expression description."""
    return ExpressionRepr(expression.expr, {**expression.resolved, **arguments})


def _record(result: ExpectationResult) -> None:
    if (test_ctx := TEST_CONTEXT.get()) is not None:
        test_ctx.expectation_results.append(result)


def expect(value: Any, message: str | None = None, *, expression: ExpressionRepr | None = None) -> Any:
    """Return ``value`` if it is truthy, otherwise raise ExpectationFailed.

    Parameters
    ----------
    value
        The already evaluated expression.
    message
        Optional explanation added to the failure message.
    expression
        Description of the expression; read from the caller's source line
        when omitted.

    Raises
    ------
    ExpectationFailed
        If ``value`` is falsy.
    """
    passed = bool(value)
    if expression is None:
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        if caller is None:
            logger.warning("No frame found for expectation source")
            expression = ExpressionRepr(UNKNOWN_EXPRESSION)
        else:
            expression = repr_from_frame(caller)
        del frame, caller

    result = ExpectationResult(expression_repr=expression, passed=passed, message=message)
    _record(result)
    if not passed:
        raise ExpectationFailed(result)
    return value


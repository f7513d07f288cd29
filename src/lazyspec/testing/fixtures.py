"""Fixture bindings and their activation during a run.

Bindings are declared as a flat list of alternating names and expressions,
e.g. ``["conn", database, "user", lambda conn: conn.create_user()]``. They are
evaluated once, in order, when the declaration is built. A :class:`Fixture`
value is different: it is set up by the runner each time its context entry is
activated (per test case for ``using``, once per sequence for ``using_once``)
and torn down afterwards.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncGenerator, Callable, Generator, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

from lazyspec.errors import DeclarationError
from lazyspec.testing.nodes import ContextEntry, call_with_values


logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


@dataclass(frozen=True)
class Fixture:
    """A stateful context value with setup and optional teardown.

    ``fn`` may return a value, or yield exactly once (code after ``yield`` is
    the teardown). Coroutine functions and async generators are supported.
    Parameters of ``fn`` are filled by name from already active contexts.
    """

    fn: Callable[..., Any]
    name: str | None = None

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.fn) or inspect.isasyncgenfunction(self.fn)

    @property
    def is_generator(self) -> bool:
        return inspect.isgeneratorfunction(self.fn)

    @property
    def is_async_generator(self) -> bool:
        return inspect.isasyncgenfunction(self.fn)

    def __repr__(self) -> str:
        return f"Fixture({self.name or getattr(self.fn, '__name__', '?')})"


def fixture(fn: Callable[P, T] | None = None, *, name: str | None = None) -> Any:
    """Wrap a function as a :class:`Fixture`.

    Example:
        @fixture
        def db():
            conn = connect()
            yield conn
            conn.close()

        using(["db", db], it("has no users", lambda db: db.count() == 0))
    """

    def decorator(fn: Callable[P, T]) -> Fixture:
        return Fixture(fn=fn, name=name or getattr(fn, "__name__", None))

    if fn is not None:
        return decorator(fn)
    return decorator


def parse_bindings(bindings: Any) -> list[tuple[str, Any]]:
    """Validate a binding list and pair names with expressions.

    Raises
    ------
    DeclarationError
        If ``bindings`` is not a list, has odd length, uses a name that is not
        an identifier, or repeats a name.
    """
    if not isinstance(bindings, list):
        msg = f"Bindings must be a list of alternating names and expressions, got {type(bindings).__name__}"
        raise DeclarationError(msg)
    if len(bindings) % 2 != 0:
        msg = f"Bindings must have an even number of entries, got {len(bindings)}"
        raise DeclarationError(msg)

    pairs = list(zip(bindings[0::2], bindings[1::2]))
    seen: set[str] = set()
    for name, _ in pairs:
        if not isinstance(name, str) or not name.isidentifier():
            msg = f"Binding name must be an identifier string, got {name!r}"
            raise DeclarationError(msg)
        if name in seen:
            msg = f"Duplicate binding name: {name}"
            raise DeclarationError(msg)
        seen.add(name)
    return pairs


def binding_names(bindings: list[Any]) -> list[str]:
    """Names of a validated binding list, in declaration order."""
    return [name for name, _ in parse_bindings(bindings)]


def evaluate_bindings(
    bindings: Any, env: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Evaluate a binding list sequentially.

    Plain functions are called with the earlier names they ask for; fixtures
    are kept as-is for the runner; anything else is bound directly. Returns
    the new names only, in declaration order.
    """
    pairs = parse_bindings(bindings)
    scope = dict(env or {})
    bound: dict[str, Any] = {}
    for name, expr in pairs:
        if isinstance(expr, Fixture):
            value = expr
        elif inspect.isfunction(expr):
            value = call_with_values(expr, scope)
        else:
            value = expr
        scope[name] = value
        bound[name] = value
    return bound


def context_entries(bound: Mapping[str, Any]) -> tuple[ContextEntry, ...]:
    return tuple(ContextEntry(name, value) for name, value in bound.items())


class ContextResolver:
    """Activates context entries and tears down fixtures.

    A resolver holds the values visible at one level of the tree. ``fork``
    creates a child that starts from those values, so once-activated contexts
    of a sequence are shared by every test case below it.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._teardowns: list[Generator[Any, None, None] | AsyncGenerator[Any, None]] = []

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def fork(self) -> ContextResolver:
        return ContextResolver(self._values)

    async def activate(self, entries: Iterable[ContextEntry]) -> dict[str, Any]:
        """Activate entries in order; later entries shadow earlier ones."""
        for entry in entries:
            self._values[entry.name] = await self._realize(entry.value)
        return self.values

    async def _realize(self, value: Any) -> Any:
        if not isinstance(value, Fixture):
            return value

        logger.debug("Setting up %r", value)
        if value.is_async_generator:
            agen = call_with_values(value.fn, self._values)
            result = await agen.__anext__()
            self._teardowns.append(agen)
        elif value.is_generator:
            gen = call_with_values(value.fn, self._values)
            result = next(gen)
            self._teardowns.append(gen)
        elif value.is_async:
            result = await call_with_values(value.fn, self._values)
        else:
            result = call_with_values(value.fn, self._values)
        return result

    async def teardown(self) -> None:
        """Run generator teardowns in LIFO order."""
        for gen in reversed(self._teardowns):
            if isinstance(gen, AsyncGenerator):
                try:
                    await gen.__anext__()
                except StopAsyncIteration:
                    pass
                else:
                    logger.warning("Fixture %r yielded more than once", gen)
            else:
                try:
                    next(gen)
                except StopIteration:
                    pass
                else:
                    logger.warning("Fixture %r yielded more than once", gen)
        self._teardowns.clear()

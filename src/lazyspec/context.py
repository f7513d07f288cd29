from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from lazyspec.assertions.expect import ExpectationResult
    from lazyspec.testing.nodes import TestCase


@dataclass(frozen=True, slots=True)
class TestContext:
    """Execution context for the test case currently running.

    Attributes
    ----------
    case
        The test case being executed.
    path
        Doc strings of the enclosing suites, outermost first.
    expectation_results
        Expectations evaluated while executing the case.
    """

    __test__ = False  # Prevent pytest from collecting this as a test class

    case: TestCase
    path: tuple[str, ...] = ()
    expectation_results: list[ExpectationResult] = field(default_factory=list)


TEST_CONTEXT: ContextVar[TestContext | None] = ContextVar("test_context", default=None)


def get_test_context() -> TestContext | None:
    """Get the current test context, or None if not in a test."""
    return TEST_CONTEXT.get()


@contextmanager
def test_context_scope(ctx: TestContext) -> Iterator[None]:
    """Temporarily set `TEST_CONTEXT` for the duration of the ``with`` block.

    Parameters
    ----------
    ctx : TestContext
        The context to bind as the current test context.
    """
    token = TEST_CONTEXT.set(ctx)
    try:
        yield
    finally:
        TEST_CONTEXT.reset(token)


test_context_scope.__test__ = False  # type: ignore[attr-defined]

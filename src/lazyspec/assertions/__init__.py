"""Expectations used by test case bodies."""

from lazyspec.assertions.expect import (
    ExpectationFailed,
    ExpectationResult,
    ExpressionRepr,
    expect,
)

__all__ = [
    "ExpectationFailed",
    "ExpectationResult",
    "ExpressionRepr",
    "expect",
]

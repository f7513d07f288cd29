"""lazyspec - declarative, lazily realized test suites."""

from .assertions import ExpectationFailed, expect
from .errors import DeclarationError
from .testing import (
    Fixture,
    Metadata,
    Runner,
    Suite,
    TestCase,
    TestSequence,
    describe,
    do_it,
    fail,
    fixture,
    given,
    it,
    run,
    skip,
    testing,
    trace_step,
    using,
    using_once,
)
from .version import __version__


__all__ = [
    # Declarations
    "describe",
    "testing",
    "it",
    "do_it",
    "using",
    "using_once",
    "given",
    "fixture",
    # Tree
    "Suite",
    "TestSequence",
    "TestCase",
    "Metadata",
    "Fixture",
    # Expectations and outcomes
    "expect",
    "ExpectationFailed",
    "DeclarationError",
    "skip",
    "fail",
    # Running
    "Runner",
    "run",
    "trace_step",
]

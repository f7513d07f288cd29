"""Reporter interface for run events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from lazyspec.testing.nodes import TestSequence
    from lazyspec.testing.results import RunResult, SuiteResult, TestResult


class Reporter(ABC):
    """Receives events from the runner as the suite tree is traversed."""

    async def on_run_start(self, count: int) -> None:
        """Called once with the number of top-level suites."""

    @abstractmethod
    async def on_suite_start(self, sequence: TestSequence, depth: int) -> None:
        """Called when a realized suite sequence is entered."""

    @abstractmethod
    async def on_suite_complete(self, result: SuiteResult, depth: int) -> None:
        """Called when every child of a sequence has run."""

    @abstractmethod
    async def on_test_complete(self, result: TestResult, depth: int) -> None:
        """Called after each test case."""

    @abstractmethod
    async def on_run_complete(self, run_result: RunResult) -> None:
        """Called once after the run."""

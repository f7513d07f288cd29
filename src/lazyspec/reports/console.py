"""Nested console reporter using Rich."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.traceback import Traceback

import lazyspec
from lazyspec.assertions.expect import ExpectationFailed
from lazyspec.reports.base import Reporter
from lazyspec.testing.results import TestStatus


if TYPE_CHECKING:
    from lazyspec.testing.nodes import TestSequence
    from lazyspec.testing.results import RunResult, SuiteResult, TestResult


_STATUS_CONFIG: dict[TestStatus, tuple[str, str, str]] = {
    TestStatus.PASSED: ("✓", "green", "PASSED"),
    TestStatus.FAILED: ("✗", "red", "FAILED"),
    TestStatus.ERROR: ("!", "yellow", "ERROR"),
    TestStatus.SKIPPED: ("-", "yellow", "SKIPPED"),
    TestStatus.PENDING: ("?", "blue", "PENDING"),
}


class NestedReporter(Reporter):
    """Prints suite docs as a tree with one line per test case."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(file=sys.__stdout__)
        self.verbosity = verbosity
        self._failures: list[TestResult | SuiteResult] = []

    def _indent(self, depth: int) -> str:
        return "  " * depth

    async def on_run_start(self, count: int) -> None:
        if not count:
            self.console.print("[yellow]No suites found.[/yellow]")
            return
        if self.verbosity >= 0:
            self.console.print(f"[bold]Running {count} suite(s)[/bold]\n")

    async def on_suite_start(self, sequence: TestSequence, depth: int) -> None:
        if self.verbosity < 0 or sequence.metadata.doc is None:
            return
        self.console.print(f"{self._indent(depth)}{escape(str(sequence.metadata.doc))}")

    async def on_suite_complete(self, result: SuiteResult, depth: int) -> None:
        if result.error is None:
            return
        if result.status is TestStatus.SKIPPED:
            detail = f"suite skipped: {result.error}"
        else:
            self._failures.append(result)
            detail = f"suite aborted: {type(result.error).__name__}"
        if self.verbosity >= 0:
            symbol, color, _ = _STATUS_CONFIG[result.status]
            self.console.print(f"{self._indent(depth + 1)}[{color}]{symbol} {escape(detail)}[/{color}]")

    async def on_test_complete(self, result: TestResult, depth: int) -> None:
        if result.status.is_failure:
            self._failures.append(result)
        if self.verbosity < 0 and not result.status.is_failure:
            return

        symbol, color, label = _STATUS_CONFIG[result.status]
        doc = escape(result.doc or "<anonymous>")
        line = f"{self._indent(depth)}[{color}]{symbol}[/{color}] {doc}"
        if result.status is TestStatus.PENDING:
            line += f" [dim]{label.lower()}[/dim]"
        elif self.verbosity > 0:
            line += f" [dim]({result.duration_ms:.1f}ms)[/dim]"
        self.console.print(line)

    def _failure_lines(self, error: BaseException | None) -> list[str] | Traceback:
        if error is None:
            return []
        if isinstance(error, ExpectationFailed):
            lines = [f"> {error.expression}"]
            if error.result.message:
                lines.append(error.result.message)
            for name, value in error.resolved.items():
                lines.append(f"  {name} = {value!r}")
            return lines
        if error.__traceback__ and self.verbosity >= 1:
            return Traceback.from_exception(
                type(error),
                error,
                error.__traceback__,
                suppress=[lazyspec],
                show_locals=self.verbosity >= 2,
            )
        return [f"{type(error).__name__}: {error}"]

    def _failure_panel(self, title: str, lines: list[str] | Traceback, color: str) -> Panel:
        content: str | Traceback = (
            lines if isinstance(lines, Traceback) else "\n".join(escape(line) for line in lines) or " "
        )
        return Panel(
            content,
            title=escape(title),
            title_align="left",
            border_style=color,
            expand=True,
            padding=(1, 1),
        )

    async def on_run_complete(self, run_result: RunResult) -> None:
        if self._failures:
            self.console.print()
            self.console.print("[bold]FAILURES[/bold]")
            for failure in self._failures:
                color = _STATUS_CONFIG[failure.status][1]
                self.console.print(
                    self._failure_panel(failure.full_name, self._failure_lines(failure.error), color)
                )

        parts = []
        if run_result.passed:
            parts.append(f"[green]{run_result.passed} passed[/green]")
        if run_result.failed:
            parts.append(f"[red]{run_result.failed} failed[/red]")
        if run_result.errors:
            parts.append(f"[yellow]{run_result.errors} errors[/yellow]")
        if run_result.skipped:
            parts.append(f"[yellow]{run_result.skipped} skipped[/yellow]")
        if run_result.pending:
            parts.append(f"[blue]{run_result.pending} pending[/blue]")

        summary = ", ".join(parts) if parts else "[dim]0 tests[/dim]"
        self.console.print()
        self.console.print(f"[bold]{summary}[/bold] in {run_result.total_duration_ms:.0f}ms")
        if run_result.stopped_early:
            self.console.print("[yellow]Run terminated early due to maxfail limit.[/yellow]")
        self._failures = []

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from rich.console import Console

from lazyspec.config import RunnerSettings
from lazyspec.testing.results import RunResult
from lazyspec.testing.runner import Runner


class CLIApplication:
    """Top-level command router."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.parser = argparse.ArgumentParser(
            prog="lazyspec",
            description="Run declarative lazyspec suites.",
        )
        subparsers = self.parser.add_subparsers(dest="command", required=True)
        run = subparsers.add_parser(
            "run",
            help="Discover suite files and run every suite they declare.",
        )
        run.add_argument(
            "path",
            nargs="?",
            default=".",
            help="Suite file or directory to search (default: current directory)",
        )
        run.add_argument(
            "--maxfail",
            type=int,
            help="Stop after this many failed or errored tests.",
        )
        run.add_argument("-v", "--verbose", action="count", default=0, help="More output; repeat for debug logs.")
        run.add_argument("-q", "--quiet", action="count", default=0, help="Only report failures.")
        run.add_argument("--trace", action="store_true", help="Record an OpenTelemetry span per suite and test case.")
        run.add_argument(
            "--trace-output",
            dest="trace_output",
            help="JSONL file receiving trace records (default: traces.jsonl)",
        )
        run.add_argument(
            "--pattern",
            dest="file_pattern",
            help="Glob for suite files inside directories (default: suite_*.py)",
        )

    def run(self, argv: Sequence[str] | None = None) -> int:
        load_dotenv(Path.cwd() / ".env")
        args = self.parser.parse_args(argv)
        return RunCommand(self.console, args).run()


class RunCommand:
    """Driver for `lazyspec run`."""

    def __init__(self, console: Console, args: argparse.Namespace) -> None:
        self.console = console
        self.path = Path(args.path).expanduser()
        self.settings = RunnerSettings(**self._overrides(args))

    @staticmethod
    def _overrides(args: argparse.Namespace) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        if args.verbose or args.quiet:
            overrides["verbosity"] = args.verbose - args.quiet
        if args.maxfail is not None:
            overrides["maxfail"] = args.maxfail
        if args.trace:
            overrides["enable_tracing"] = True
        if args.trace_output:
            overrides["trace_output"] = Path(args.trace_output)
        if args.file_pattern:
            overrides["file_pattern"] = args.file_pattern
        return overrides

    def run(self) -> int:
        logging.basicConfig(
            level=logging.DEBUG if self.settings.verbosity >= 2 else logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        if not self.path.exists():
            self.console.print(f"[red]No such file or directory: {self.path}[/red]")
            return 2
        result = asyncio.run(self.execute())
        return 0 if result.ok else 1

    async def execute(self) -> RunResult:
        runner = Runner.from_settings(self.settings, self.console)
        result = await runner.run(path=self.path)
        if self.settings.enable_tracing:
            self.console.print(f"Traces written to {self.settings.trace_output}", style="dim")
        return result


def main() -> None:
    sys.exit(CLIApplication().run())


if __name__ == "__main__":
    main()

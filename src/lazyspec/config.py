"""Runner configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunnerSettings(BaseSettings):
    """Settings for a test run.

    Loads from environment variables automatically:
        LAZYSPEC_VERBOSITY, LAZYSPEC_MAXFAIL, LAZYSPEC_ENABLE_TRACING,
        LAZYSPEC_TRACE_OUTPUT, LAZYSPEC_FILE_PATTERN
    """

    verbosity: int = Field(default=0, description="-1 quiet, 0 normal, 1+ verbose")
    maxfail: int | None = Field(default=None, description="Stop after this many failed or errored tests")
    enable_tracing: bool = Field(default=False, description="Record an OpenTelemetry span per suite and test case")
    trace_output: Path = Field(default=Path("traces.jsonl"), description="JSONL file receiving spans")
    file_pattern: str = Field(default="suite_*.py", description="Glob for suite files during discovery")

    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="LAZYSPEC_",
    )

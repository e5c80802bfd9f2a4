"""Models for invocation outcomes and suite counters."""

from dataclasses import dataclass
from typing import Literal

from pydantic import Field

from playwright_serverless.models.base import Model
from playwright_serverless.models.invocation import TestUnit

SCHEMA_VERSION = 1


class SuiteStats(Model):
    """Suite counters reported by (or derived for) one invocation."""

    num_failed_tests: int = Field(default=0, ge=0)
    num_passed_tests: int = Field(default=0, ge=0)
    num_pending_tests: int = Field(default=0, ge=0)
    num_total_tests: int = Field(default=0, ge=0)
    total_time_execution: int = Field(default=0, ge=0)


class SandboxResponseBody(Model):
    """Body returned by the sandbox for a 200 or 500 response."""

    schema_version: Literal[1] = SCHEMA_VERSION
    success: bool
    duration: int | None = Field(default=None, ge=0)
    test_match: str | None = None
    error: str | None = None
    stack: str | None = None
    stats: SuiteStats | None = None


@dataclass(frozen=True, kw_only=True)
class InvocationResult:
    """Canonical outcome of one remote execution.

    A successful result carries ``duration_ms``; a failed one carries
    ``error`` (and optionally ``stack``). Never both.
    """

    success: bool
    test_unit: TestUnit
    duration_ms: int | None = None
    error: str | None = None
    stack: str | None = None
    stats: SuiteStats | None = None

    def __post_init__(self) -> None:
        if self.success:
            if self.duration_ms is None or self.duration_ms < 0:
                raise ValueError("Successful result requires a non-negative duration")
            if self.error is not None or self.stack is not None:
                raise ValueError("Successful result cannot carry an error")
        else:
            if self.error is None:
                raise ValueError("Failed result requires an error message")
            if self.duration_ms is not None:
                raise ValueError("Failed result cannot carry a duration")

    @classmethod
    def passed(
        cls,
        *,
        test_unit: TestUnit,
        duration_ms: int,
        stats: SuiteStats | None = None,
    ) -> "InvocationResult":
        return cls(
            success=True, test_unit=test_unit, duration_ms=duration_ms, stats=stats
        )

    @classmethod
    def failed(
        cls,
        *,
        test_unit: TestUnit,
        error: str,
        stack: str | None = None,
        stats: SuiteStats | None = None,
    ) -> "InvocationResult":
        return cls(
            success=False, test_unit=test_unit, error=error, stack=stack, stats=stats
        )

    def counters(self) -> SuiteStats:
        """Return reported counters, or a single-test snapshot of the outcome."""
        if self.stats is not None:
            return self.stats
        if self.success:
            return SuiteStats(
                num_passed_tests=1,
                num_total_tests=1,
                total_time_execution=self.duration_ms or 0,
            )
        return SuiteStats(num_failed_tests=1, num_total_tests=1)

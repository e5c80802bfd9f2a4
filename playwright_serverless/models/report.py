"""Models for the outcome of a whole suite run."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from playwright_serverless.models.result import InvocationResult, SuiteStats


@dataclass(frozen=True, kw_only=True)
class SuiteReport:
    """Aggregated outcome of a completed suite run."""

    stats: SuiteStats
    results: Sequence[InvocationResult]
    num_total_files: int
    batches_run: int
    start_test_time: int
    elapsed_ms: int

    @property
    def has_failures(self) -> bool:
        return any(not result.success for result in self.results)


@dataclass(frozen=True, kw_only=True)
class FatalError:
    """Failure that prevented the suite from running to completion."""

    kind: Literal["discovery-empty", "discovery-failed", "orchestration-fault"]
    message: str

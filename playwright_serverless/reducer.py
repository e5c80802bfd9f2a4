"""Reduction of per-invocation counters into one suite summary."""

from collections.abc import Callable, Sequence
from typing import Literal

from playwright_serverless.models.result import SuiteStats

type AggregationMode = Literal["max", "sum"]

COUNTER_FIELDS: tuple[str, ...] = tuple(SuiteStats.model_fields)


def _reduce(
    stats: Sequence[SuiteStats], combine: Callable[[list[int]], int]
) -> SuiteStats:
    if not stats:
        raise ValueError("Cannot reduce an empty list of results")
    return SuiteStats(
        **{name: combine([getattr(s, name) for s in stats]) for name in COUNTER_FIELDS}
    )


def reduce_max(stats: Sequence[SuiteStats]) -> SuiteStats:
    """Return the element-wise maximum of every counter.

    Each invocation reports a full counter snapshot, so the worst case
    across snapshots is kept rather than a total.
    """
    return _reduce(stats, max)


def reduce_sum(stats: Sequence[SuiteStats]) -> SuiteStats:
    """Return the element-wise sum, treating each snapshot as a delta."""
    return _reduce(stats, sum)


def reduce_stats(
    stats: Sequence[SuiteStats], mode: AggregationMode = "max"
) -> SuiteStats:
    """Reduce counters with the given aggregation mode."""
    if mode == "sum":
        return reduce_sum(stats)
    return reduce_max(stats)

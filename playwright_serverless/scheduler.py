"""Batch scheduler dispatching test units to the remote sandbox."""

import asyncio
import logging
import math
import time
import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field

from playwright_serverless.codec import PayloadDecodeError, decode_invocation_result
from playwright_serverless.config import DiscoverySettings, SchedulerSettings
from playwright_serverless.discovery import discover_test_units
from playwright_serverless.models.invocation import (
    Batch,
    InvocationRequest,
    TestUnit,
)
from playwright_serverless.models.report import FatalError, SuiteReport
from playwright_serverless.models.result import InvocationResult, SuiteStats
from playwright_serverless.reducer import reduce_stats
from playwright_serverless.reporting import log_failed_test_pattern, log_start
from playwright_serverless.transports.base import (
    InvocationTransport,
    InvocationTransportError,
)

log = logging.getLogger(__name__)


def partition(units: Sequence[TestUnit], batch_size: int) -> Sequence[Batch]:
    """Split units into contiguous batches of at most ``batch_size``.

    Concatenating the batches reproduces ``units`` in order.
    """
    if batch_size < 1:
        raise ValueError(f"Batch size must be at least 1, got {batch_size}")

    total = math.ceil(len(units) / batch_size)
    return [
        Batch(
            index=start // batch_size + 1,
            total=total,
            units=tuple(units[start : start + batch_size]),
        )
        for start in range(0, len(units), batch_size)
    ]


def now_ms() -> int:
    return int(time.time() * 1000)


def _is_set(event: asyncio.Event | None) -> bool:
    return event is not None and event.is_set()


@dataclass(frozen=True, kw_only=True)
class BatchScheduler:
    """Runs test units batch by batch through a transport.

    Batches run sequentially with a cooldown between them; invocations
    inside a batch run concurrently and settle independently.
    """

    transport: InvocationTransport
    settings: SchedulerSettings = field(default_factory=SchedulerSettings)

    async def run(
        self,
        units: Sequence[TestUnit],
        start_test_time: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SuiteReport:
        """Run every unit and reduce the results into a report.

        Args:
            units: Test units in discovery order
            start_test_time: Suite start in epoch milliseconds (defaults to now)
            cancel_event: When set, no further batch is started

        Returns:
            Report covering every batch that was started

        """
        if start_test_time is None:
            start_test_time = now_ms()
        started = time.monotonic()

        batches = partition(units, self.settings.batch_size)
        all_results: list[InvocationResult] = []
        batches_run = 0

        for batch in batches:
            if _is_set(cancel_event):
                log.warning(
                    "Cancellation requested, skipping %d remaining batch(es)",
                    batch.total - batch.index + 1,
                )
                break

            log.info(
                "[Batch %d/%d] Processing %d tests...",
                batch.index,
                batch.total,
                len(batch),
            )
            all_results.extend(await self._run_batch(batch, start_test_time))
            batches_run += 1
            log.info("[Batch %d/%d] Completed", batch.index, batch.total)

            if batch.index < batch.total and not _is_set(cancel_event):
                delay = self.settings.delay_between_batches
                log.info("Waiting %.1fs before next batch...", delay)
                await asyncio.sleep(delay)

        if all_results:
            stats = reduce_stats(
                [result.counters() for result in all_results],
                self.settings.aggregation,
            )
        else:
            stats = SuiteStats()

        return SuiteReport(
            stats=stats,
            results=all_results,
            num_total_files=len(units),
            batches_run=batches_run,
            start_test_time=start_test_time,
            elapsed_ms=round((time.monotonic() - started) * 1000),
        )

    async def _run_batch(
        self, batch: Batch, start_test_time: int
    ) -> Sequence[InvocationResult]:
        """Dispatch a batch and wait until every invocation settles."""
        requests = [
            InvocationRequest(
                test_unit=unit,
                function_name=self.settings.function_name,
                start_test_time=start_test_time,
            )
            for unit in batch.units
        ]
        tasks = [asyncio.create_task(self._invoke(request)) for request in requests]

        _, pending = await asyncio.wait(tasks, timeout=self.settings.batch_timeout)
        if pending:
            log.error(
                "[Batch %d/%d] Deadline of %.1fs exceeded, cancelling %d invocation(s)",
                batch.index,
                batch.total,
                self.settings.batch_timeout,
                len(pending),
            )
            for task in pending:
                task.cancel()
            await asyncio.wait(pending)

        return [
            self._settle(request, task, timed_out=task in pending)
            for request, task in zip(requests, tasks, strict=True)
        ]

    def _settle(
        self,
        request: InvocationRequest,
        task: "asyncio.Task[InvocationResult]",
        timed_out: bool = False,
    ) -> InvocationResult:
        """Convert a finished invocation task into a result."""
        if task.cancelled():
            if timed_out:
                error = f"Batch deadline of {self.settings.batch_timeout}s exceeded"
            else:
                error = "Invocation was cancelled"
            return InvocationResult.failed(test_unit=request.test_unit, error=error)

        if (exc := task.exception()) is not None:
            log.error(
                "Invocation failed: file=%s error=%s",
                request.test_unit,
                exc,
                exc_info=exc,
            )
            return InvocationResult.failed(
                test_unit=request.test_unit,
                error=str(exc) or type(exc).__name__,
                stack="".join(traceback.format_exception(exc)),
            )

        return task.result()

    async def _invoke(self, request: InvocationRequest) -> InvocationResult:
        """Invoke the transport for one unit and decode the response."""
        try:
            envelope = await self.transport.invoke_with_retry(
                request,
                timeout=self.settings.invocation_timeout,
                max_attempts=self.settings.max_attempts,
                backoff=self.settings.retry_backoff,
            )
            result = decode_invocation_result(envelope, request.test_unit)
        except TimeoutError:
            log.error(
                "Invocation timed out: file=%s timeout=%ss",
                request.test_unit,
                self.settings.invocation_timeout,
            )
            return InvocationResult.failed(
                test_unit=request.test_unit,
                error=(
                    f"Invocation timed out after {self.settings.invocation_timeout}s"
                ),
            )
        except (InvocationTransportError, PayloadDecodeError) as exc:
            log.error("Invocation failed: file=%s error=%s", request.test_unit, exc)
            return InvocationResult.failed(test_unit=request.test_unit, error=str(exc))

        log.info(
            "Test completed: file=%s success=%s",
            result.test_unit,
            result.success,
        )
        return result


async def orchestrate(
    transport: InvocationTransport,
    discovery: DiscoverySettings,
    settings: SchedulerSettings,
    cancel_event: asyncio.Event | None = None,
) -> SuiteReport | FatalError:
    """Discover tests and run them, without touching process state.

    Returns:
        The suite report, or a FatalError when discovery failed, no test
        matched the pattern or the scheduling pipeline itself raised

    """
    try:
        discovered = discover_test_units(
            discovery.test_pattern, discovery.base_dir, discovery.execution_root
        )
    except Exception as exc:
        log.exception("Test discovery failed for pattern: %s", discovery.test_pattern)
        return FatalError(kind="discovery-failed", message=str(exc))

    if discovered.num_total_files == 0:
        log_failed_test_pattern(log, discovery.test_pattern)
        return FatalError(
            kind="discovery-empty",
            message=f"No test files match pattern {discovery.test_pattern}",
        )

    log_start(log, discovered.num_total_files)

    scheduler = BatchScheduler(transport=transport, settings=settings)
    try:
        return await scheduler.run(discovered.files, cancel_event=cancel_event)
    except Exception as exc:
        log.exception("Test orchestration failed")
        return FatalError(kind="orchestration-fault", message=str(exc))

"""Console and JSON reporting of suite runs."""

import logging
from typing import Any

from playwright_serverless.models.report import SuiteReport

PASSED_SYMBOL = "✓"
FAILED_SYMBOL = "✗"


def log_failed_test_pattern(log: logging.Logger, test_pattern: str) -> None:
    """Log that a discovery pattern matched nothing."""
    log.error("No test files found for pattern: %s", test_pattern)


def log_start(log: logging.Logger, num_total_files: int) -> None:
    log.info("Running %d test file(s) on the serverless backend", num_total_files)


def log_results_summary(log: logging.Logger, report: SuiteReport) -> None:
    """Log per-test outcomes followed by the aggregated counters."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in report.results:
        if result.success:
            log.info(
                "%s %s (%dms)", PASSED_SYMBOL, result.test_unit, result.duration_ms
            )
        else:
            log.info("%s %s", FAILED_SYMBOL, result.test_unit)
            log.info("  Error: %s", result.error)

    stats = report.stats
    log.info(
        "Tests: %d passed, %d failed, %d pending",
        stats.num_passed_tests,
        stats.num_failed_tests,
        stats.num_pending_tests,
    )
    log.info(
        "Total: %d test(s) in %d file(s), execution time %dms, wall time %dms",
        stats.num_total_tests,
        report.num_total_files,
        stats.total_time_execution,
        report.elapsed_ms,
    )


def format_output(report: SuiteReport) -> dict[str, Any]:
    """Format a suite report for JSON output."""
    return {
        "numTotalFiles": report.num_total_files,
        "batches": report.batches_run,
        "startTestTime": report.start_test_time,
        "elapsedMs": report.elapsed_ms,
        "summary": report.stats.model_dump(mode="json", by_alias=True),
        "results": [
            {
                "testMatch": result.test_unit,
                "success": result.success,
                "duration": result.duration_ms,
                "error": result.error,
            }
            for result in report.results
        ],
    }

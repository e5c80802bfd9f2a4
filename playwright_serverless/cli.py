"""CLI entry point for running the end-to-end suite on the serverless backend."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from playwright_serverless.config import (
    DEFAULT_FUNCTION_NAME,
    DiscoverySettings,
    SchedulerSettings,
)
from playwright_serverless.discovery import DEFAULT_EXECUTION_ROOT
from playwright_serverless.models.report import FatalError
from playwright_serverless.reporting import format_output, log_results_summary
from playwright_serverless.scheduler import orchestrate
from playwright_serverless.transports.loading import (
    available_transports,
    load_transport_manifest,
)

DEFAULT_TRANSPORT = "lambda-http"


async def run(
    transport_key: str,
    transport_config_json: str,
    discovery: DiscoverySettings,
    settings: SchedulerSettings,
    fail_on_test_failure: bool = False,
) -> int:
    """Run the suite and return the exit code.

    Test failures only change the exit code when ``fail_on_test_failure``
    is set; otherwise 1 means the run itself could not complete.
    """
    log = logging.getLogger("playwright_serverless")

    log.info("Loading transport: %s", transport_key)
    manifest = load_transport_manifest(transport_key)

    async with manifest.open(json.loads(transport_config_json)) as transport:
        outcome = await orchestrate(transport, discovery, settings)

    if isinstance(outcome, FatalError):
        log.error("Suite aborted (%s): %s", outcome.kind, outcome.message)
        return 1

    log_results_summary(log, outcome)
    print(json.dumps(format_output(outcome), indent=2))

    if fail_on_test_failure and outcome.has_failures:
        return 1
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run Playwright test files on a serverless backend in batches"
    )
    parser.add_argument(
        "--transport",
        default=DEFAULT_TRANSPORT,
        help=f"Transport key (registered: {', '.join(available_transports())})",
    )
    parser.add_argument(
        "--transport-config",
        default="{}",
        help="JSON configuration for the transport",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=Path("../tests"),
        help="Directory the test pattern is resolved against",
    )
    parser.add_argument(
        "--test-pattern",
        default="E2E/*.test.py",
        help="Glob pattern selecting test files",
    )
    parser.add_argument(
        "--execution-root",
        default=DEFAULT_EXECUTION_ROOT,
        help="Directory holding the test files on the remote host",
    )
    parser.add_argument(
        "--function-name",
        default=DEFAULT_FUNCTION_NAME,
        help="Name of the remote function to invoke",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=5,
        help="Number of tests invoked concurrently",
    )
    parser.add_argument(
        "--delay-between-batches",
        type=float,
        default=2.0,
        help="Seconds to wait between batches",
    )
    parser.add_argument(
        "--invocation-timeout",
        type=float,
        default=300.0,
        help="Seconds before a single invocation is abandoned",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=1,
        help="Attempts per invocation on transport failure or timeout",
    )
    parser.add_argument(
        "--aggregation",
        choices=["max", "sum"],
        default="max",
        help="How per-invocation counters are combined",
    )
    parser.add_argument(
        "--fail-on-test-failure",
        action="store_true",
        help="Exit with 1 when any test failed",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            transport_key=args.transport,
            transport_config_json=args.transport_config,
            discovery=DiscoverySettings(
                base_dir=args.base_dir,
                test_pattern=args.test_pattern,
                execution_root=args.execution_root,
            ),
            settings=SchedulerSettings(
                function_name=args.function_name,
                batch_size=args.batch_size,
                delay_between_batches=args.delay_between_batches,
                invocation_timeout=args.invocation_timeout,
                max_attempts=args.max_attempts,
                aggregation=args.aggregation,
            ),
            fail_on_test_failure=args.fail_on_test_failure,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

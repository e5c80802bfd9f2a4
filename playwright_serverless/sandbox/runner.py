"""Remote execution sandbox: runs one test module against a fresh browser."""

import asyncio
import importlib.util
import inspect
import json
import logging
import os
import sys
import time
import traceback
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any

from playwright.async_api import Page

from playwright_serverless.codec import encode_response
from playwright_serverless.models.result import SandboxResponseBody
from playwright_serverless.sandbox.browser import BrowserFactory, chromium_page

log = logging.getLogger(__name__)

ENTRY_POINT_NAME = "run"
MISSING_TEST_MATCH = "Property 'testMatch' not found."


class TestEntryMissingError(Exception):
    """Raised when a test module does not expose a callable entry point."""

    __test__ = False


def extract_test_match(event: Mapping[str, Any]) -> str | None:
    """Return ``testMatch`` from the event body, which may be JSON text."""
    body = event.get("body")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return None
    if not isinstance(body, Mapping):
        return None
    test_match = body.get("testMatch")
    return test_match if isinstance(test_match, str) and test_match else None


def load_test_module(path: Path) -> ModuleType:
    """Import a test module from its file path.

    Each call executes the file anew under a unique module name.
    """
    resolved = path.resolve()
    name = f"serverless_e2e_{abs(hash(str(resolved)))}_{time.monotonic_ns()}"
    spec = importlib.util.spec_from_file_location(name, resolved)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load test module from {resolved}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(name, None)
    return module


def describe_failure(exc: BaseException) -> str:
    """Return the error message reported for a failed test."""
    message = str(exc)
    if isinstance(exc, Exception):
        return message or type(exc).__name__
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def resolve_entry(module: ModuleType, test_match: str) -> Callable[[Page], Any]:
    """Return the module's test entry point."""
    entry = getattr(module, ENTRY_POINT_NAME, None)
    if not callable(entry):
        raise TestEntryMissingError(
            f"Test file {test_match} does not define a callable '{ENTRY_POINT_NAME}'."
        )
    return entry


@dataclass(frozen=True, kw_only=True)
class TestSandbox:
    """Executes exactly one test module per invocation.

    A browser is provisioned per call and released before ``run_test``
    returns. Every failure is turned into a 500 response.
    """

    __test__ = False

    task_root: Path
    browser_factory: BrowserFactory = field(default=chromium_page, repr=False)

    async def run_test(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Run the test named by the event and return a response envelope."""
        test_match = extract_test_match(event)
        if test_match is None:
            log.warning("Rejecting invocation without testMatch")
            return encode_response(400, MISSING_TEST_MATCH)

        log.info("Running test file: %s", test_match)

        try:
            async with self.browser_factory() as page:
                duration = await self._execute(test_match, page)
        except (asyncio.CancelledError, KeyboardInterrupt):
            raise
        except BaseException as exc:
            # Test code may raise SystemExit or a test framework outcome.
            log.exception("Test execution failed: %s", test_match)
            return encode_response(
                500,
                SandboxResponseBody(
                    success=False,
                    test_match=test_match,
                    error=describe_failure(exc),
                    stack=traceback.format_exc(),
                ),
            )

        log.info("Test passed: %s (%dms)", test_match, duration)
        return encode_response(
            200,
            SandboxResponseBody(success=True, duration=duration, test_match=test_match),
        )

    async def _execute(self, test_match: str, page: Page) -> int:
        """Load and run the module, returning its duration in milliseconds."""
        test_path = self.task_root / test_match
        log.info("Loading test module from: %s", test_path)
        module = load_test_module(test_path)
        entry = resolve_entry(module, test_match)

        started = time.perf_counter()
        outcome = entry(page)
        if inspect.isawaitable(outcome):
            await outcome
        return round((time.perf_counter() - started) * 1000)


def handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point."""
    task_root = Path(os.environ.get("LAMBDA_TASK_ROOT", "."))
    return asyncio.run(TestSandbox(task_root=task_root).run_test(event))

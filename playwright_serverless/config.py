"""Settings for test discovery and batch scheduling."""

from pathlib import Path

from pydantic import BaseModel, Field

from playwright_serverless.discovery import DEFAULT_EXECUTION_ROOT
from playwright_serverless.reducer import AggregationMode

DEFAULT_FUNCTION_NAME = "playwright-serverless-dev-run-tests"


class DiscoverySettings(BaseModel):
    """Where test modules are found and where they live remotely."""

    base_dir: Path = Path("../tests")
    test_pattern: str = "E2E/*.test.py"
    execution_root: str = DEFAULT_EXECUTION_ROOT


class SchedulerSettings(BaseModel):
    """Batching, throttling and resilience settings for the scheduler.

    Timeouts and delays are in seconds. Retries only apply to transport
    failures and timeouts, never to a test that ran and failed.
    """

    function_name: str = DEFAULT_FUNCTION_NAME
    batch_size: int = Field(default=5, ge=1)
    delay_between_batches: float = Field(default=2.0, ge=0)
    invocation_timeout: float | None = Field(default=300.0, gt=0)
    batch_timeout: float | None = Field(default=None, gt=0)
    max_attempts: int = Field(default=1, ge=1)
    retry_backoff: float = Field(default=1.0, ge=0)
    aggregation: AggregationMode = "max"

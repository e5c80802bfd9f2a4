"""Local transport running the sandbox in-process."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from playwright_serverless.models.invocation import (
    InvocationEnvelope,
    InvocationRequest,
)
from playwright_serverless.sandbox.runner import TestSandbox
from playwright_serverless.transports.base import InvocationTransport
from playwright_serverless.transports.local.config import LocalConfig


@dataclass(frozen=True, kw_only=True)
class LocalTransport(InvocationTransport):
    """Runs each invocation through an in-process sandbox.

    The sandbox response envelope is handed back as a structured value,
    exercising the same decoding path as a remote response.
    """

    sandbox: TestSandbox

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: LocalConfig
    ) -> AsyncGenerator["LocalTransport", None]:
        """Create transport around a sandbox rooted at the configured task root."""
        yield cls(sandbox=TestSandbox(task_root=config.task_root))

    async def invoke(self, request: InvocationRequest) -> InvocationEnvelope:
        """Run the sandbox for the request's test unit."""
        response = await self.sandbox.run_test(request.to_event())
        return InvocationEnvelope(payload=response, status_code=response["statusCode"])

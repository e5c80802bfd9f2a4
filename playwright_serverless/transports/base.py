"""Abstract base class for remote invocation transports."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from playwright_serverless.models.invocation import (
    InvocationEnvelope,
    InvocationRequest,
)

log = logging.getLogger(__name__)


class InvocationTransportError(Exception):
    """Raised when a transport fails to deliver a response."""


@dataclass(frozen=True, kw_only=True)
class InvocationTransport(ABC):
    """Channel used to invoke the remote sandbox for one test unit.

    Implementations must tolerate concurrent ``invoke`` calls; the scheduler
    issues a whole batch at once.
    """

    @abstractmethod
    async def invoke(self, request: InvocationRequest) -> InvocationEnvelope:
        """Invoke the remote function and return its raw response.

        Args:
            request: Test unit and routing metadata

        Returns:
            Undecoded response envelope

        Raises:
            InvocationTransportError: If no response could be obtained

        """

    async def invoke_with_retry(
        self,
        request: InvocationRequest,
        timeout: float | None = None,
        max_attempts: int = 1,
        backoff: float = 1.0,
    ) -> InvocationEnvelope:
        """Invoke with a per-attempt timeout and exponential backoff.

        Args:
            request: Test unit and routing metadata
            timeout: Maximum seconds per attempt (None waits indefinitely)
            max_attempts: Total attempts before giving up
            backoff: Delay before the second attempt, doubled on each retry

        Returns:
            Undecoded response envelope

        Raises:
            InvocationTransportError: If the last attempt failed to deliver
            TimeoutError: If the last attempt exceeded ``timeout``

        """
        attempt = 1
        while True:
            try:
                async with asyncio.timeout(timeout):
                    return await self.invoke(request)
            except (InvocationTransportError, TimeoutError) as exc:
                if attempt >= max_attempts:
                    raise
                delay = backoff * 2 ** (attempt - 1)
                log.warning(
                    "Invocation of %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    request.test_unit,
                    attempt,
                    max_attempts,
                    str(exc) or type(exc).__name__,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1

"""Lambda HTTP transport implementation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from urllib.parse import quote

import aiohttp

from playwright_serverless.models.invocation import (
    InvocationEnvelope,
    InvocationRequest,
)
from playwright_serverless.transports.base import (
    InvocationTransport,
    InvocationTransportError,
)
from playwright_serverless.transports.lambda_http.config import LambdaHttpConfig

log = logging.getLogger(__name__)

FUNCTION_ERROR_HEADER = "X-Amz-Function-Error"


@dataclass(frozen=True, kw_only=True)
class LambdaHttpTransport(InvocationTransport):
    """Invokes the sandbox function through the Lambda Invoke HTTP API.

    The response body is returned undecoded; a function error reported by
    the runtime (unhandled exception in the handler) is a transport failure.
    """

    config: LambdaHttpConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: LambdaHttpConfig
    ) -> AsyncGenerator["LambdaHttpTransport", None]:
        """Create transport with managed session lifecycle."""
        headers = {"Content-Type": "application/json"}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
        ) as session:
            yield cls(config=config, session=session)

    async def invoke(self, request: InvocationRequest) -> InvocationEnvelope:
        """POST the invocation event and return the raw response body."""
        url = self.config.invocation_path.format(
            function_name=quote(request.function_name, safe="")
        )
        log.debug("Invoking %s for %s", url, request.test_unit)

        try:
            async with self.session.post(url, json=request.to_event()) as response:
                payload = await response.read()
                status = response.status
                function_error = response.headers.get(FUNCTION_ERROR_HEADER)
        except aiohttp.ClientError as exc:
            raise InvocationTransportError(
                f"Failed to invoke {request.function_name}: {exc}"
            ) from exc

        if not 200 <= status < 300:
            text = payload.decode("utf-8", errors="replace")
            raise InvocationTransportError(
                f"Failed to invoke {request.function_name}: {status} {text}"
            )

        if function_error:
            text = payload.decode("utf-8", errors="replace")
            raise InvocationTransportError(
                f"Function {request.function_name} raised ({function_error}): {text}"
            )

        return InvocationEnvelope(payload=payload, status_code=status)

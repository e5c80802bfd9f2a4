"""Lambda HTTP transport module."""

from playwright_serverless.transports.lambda_http.config import LambdaHttpConfig
from playwright_serverless.transports.lambda_http.manifest import lambda_http_manifest
from playwright_serverless.transports.lambda_http.transport import (
    LambdaHttpTransport,
)

__all__ = ["LambdaHttpConfig", "LambdaHttpTransport", "lambda_http_manifest"]

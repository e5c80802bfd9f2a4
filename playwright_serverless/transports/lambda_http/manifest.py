"""Lambda HTTP transport manifest."""

from playwright_serverless.transports.lambda_http.config import LambdaHttpConfig
from playwright_serverless.transports.lambda_http.transport import (
    LambdaHttpTransport,
)
from playwright_serverless.transports.manifest import TransportManifest

lambda_http_manifest = TransportManifest(
    config_cls=LambdaHttpConfig,
    transport_factory=LambdaHttpTransport.from_config,
)

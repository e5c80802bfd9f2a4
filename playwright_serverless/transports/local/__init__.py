"""Local in-process transport module."""

from playwright_serverless.transports.local.config import LocalConfig
from playwright_serverless.transports.local.manifest import local_manifest
from playwright_serverless.transports.local.transport import LocalTransport

__all__ = ["LocalConfig", "LocalTransport", "local_manifest"]

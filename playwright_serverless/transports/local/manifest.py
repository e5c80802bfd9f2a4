"""Local transport manifest."""

from playwright_serverless.transports.local.config import LocalConfig
from playwright_serverless.transports.local.transport import LocalTransport
from playwright_serverless.transports.manifest import TransportManifest

local_manifest = TransportManifest(
    config_cls=LocalConfig,
    transport_factory=LocalTransport.from_config,
)

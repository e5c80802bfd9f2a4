"""Transport manifest definition for the plugin system."""

from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from playwright_serverless.transports.base import InvocationTransport

type TransportFactory[ConfigT] = Callable[
    [ConfigT], AbstractAsyncContextManager[InvocationTransport]
]


@dataclass(frozen=True, kw_only=True)
class TransportManifest[ConfigT: BaseModel]:
    """Pairs a transport's configuration model with the factory opening it.

    The factory owns whatever the transport holds (HTTP session, local
    resources) and releases it when the context exits.
    """

    config_cls: type[ConfigT]
    transport_factory: TransportFactory[ConfigT]

    def open(
        self, raw_config: Mapping[str, Any]
    ) -> AbstractAsyncContextManager[InvocationTransport]:
        """Validate raw configuration and open the transport with it.

        Raises:
            pydantic.ValidationError: If the configuration does not match
                ``config_cls``

        """
        config = self.config_cls.model_validate(raw_config)
        return self.transport_factory(config)

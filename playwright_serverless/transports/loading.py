"""Transport lookup through the ``playwright_serverless.transports`` entry points."""

import logging
from importlib.metadata import entry_points
from typing import Any

from playwright_serverless.transports.manifest import TransportManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "playwright_serverless.transports"


class TransportNotFoundError(LookupError):
    """Raised when no transport is registered under a key."""


def available_transports() -> list[str]:
    """Return the registered transport keys, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_transport_manifest(key: str) -> TransportManifest[Any]:
    """Load the manifest registered under ``key``.

    Raises:
        TransportNotFoundError: If no transport with the given key is found
        TypeError: If the entry point does not resolve to a TransportManifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise TransportNotFoundError(
            f"Transport '{key}' not found. Available transports: {available_transports()}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, TransportManifest):
        raise TypeError(
            f"Entry point '{key}' ({entry.value}) is not a TransportManifest"
        )

    log.debug("Loaded transport '%s' from %s", key, entry.value)
    return manifest

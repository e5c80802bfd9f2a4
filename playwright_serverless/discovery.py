"""Discover test modules to run on the remote backend."""

import glob
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from playwright_serverless.models.invocation import TestUnit

log = logging.getLogger(__name__)

DEFAULT_EXECUTION_ROOT = "/app"


@dataclass(frozen=True, kw_only=True)
class DiscoveryResult:
    """Test units matched by a pattern, in discovery order."""

    files: Sequence[TestUnit]

    @property
    def num_total_files(self) -> int:
        return len(self.files)


def discover_test_units(
    test_pattern: str,
    base_dir: Path,
    execution_root: str = DEFAULT_EXECUTION_ROOT,
) -> DiscoveryResult:
    """Resolve a glob pattern into test units rooted at the execution root.

    Args:
        test_pattern: Glob pattern relative to ``base_dir`` (e.g. "E2E/*.test.py").
            It may reach above ``base_dir``; such matches keep their ``..``
            segments.
        base_dir: Directory holding the test modules locally
        execution_root: Directory the modules live under on the remote host

    Returns:
        Matching files sorted by relative path, each rewritten as
        ``<execution_root>/<relative path>``. An empty result is not an
        error here; the caller decides how to handle it.

    """
    matches = glob.glob(test_pattern, root_dir=base_dir, recursive=True)
    relative_paths = sorted(
        PurePath(os.path.relpath(base_dir / match, base_dir)).as_posix()
        for match in matches
        if (base_dir / match).is_file()
    )
    root = execution_root.rstrip("/")
    files = tuple(f"{root}/{relative}" for relative in relative_paths)

    log.debug(
        "Discovered %d file(s) for pattern %s under %s", len(files), test_pattern, base_dir
    )
    return DiscoveryResult(files=files)

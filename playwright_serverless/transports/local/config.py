"""Configuration for the local transport."""

from pathlib import Path

from pydantic import BaseModel


class LocalConfig(BaseModel):
    """Configuration for the local transport.

    ``task_root`` plays the role of the function's task root: relative test
    units are resolved against it.
    """

    task_root: Path = Path(".")

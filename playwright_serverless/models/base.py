"""Base model configuration for wire-level data structures."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    """Frozen model serialized with camelCase keys.

    Payloads exchanged with the remote function use camelCase
    (``testMatch``, ``numFailedTests``); attributes stay snake_case.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

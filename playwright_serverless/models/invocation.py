"""Models describing a single remote invocation and its grouping into batches."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

type TestUnit = str


@dataclass(frozen=True, kw_only=True)
class InvocationRequest:
    """Routing data for one remote execution of a test unit."""

    test_unit: TestUnit
    function_name: str
    start_test_time: int

    def to_event(self) -> dict[str, Any]:
        """Build the event delivered to the remote function."""
        return {
            "body": {"testMatch": self.test_unit},
            "functionName": self.function_name,
            "startTestTime": self.start_test_time,
        }


@dataclass(frozen=True, kw_only=True)
class InvocationEnvelope:
    """Raw response of a transport, before decoding.

    ``payload`` may be bytes, text or an already structured value.
    """

    payload: Any
    status_code: int | None = None


@dataclass(frozen=True, kw_only=True)
class Batch:
    """Contiguous slice of test units dispatched together."""

    index: int
    total: int
    units: Sequence[TestUnit]

    def __len__(self) -> int:
        return len(self.units)

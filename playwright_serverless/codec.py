"""Decoding of remote invocation responses and encoding of sandbox responses."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from playwright_serverless.models.invocation import InvocationEnvelope, TestUnit
from playwright_serverless.models.result import InvocationResult, SandboxResponseBody


class PayloadDecodeError(ValueError):
    """Raised when an invocation response cannot be decoded."""


class EmptyPayloadError(PayloadDecodeError):
    """Raised when an invocation response carries no payload."""


class MalformedPayloadError(PayloadDecodeError):
    """Raised when a payload is not valid JSON or violates the response schema."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(f"{message}: {raw}")
        self.raw = raw


def decode_payload(envelope: InvocationEnvelope | None) -> Any:
    """Normalize an invocation response into its decoded body.

    The remote function wraps its JSON body in a ``{"statusCode", "body"}``
    envelope whose body is itself a JSON string, and the transport may hand
    the whole thing over as bytes, text or an already parsed value. One extra
    level of encoding is unwrapped in either direction.

    Raises:
        EmptyPayloadError: If there is no payload at all
        MalformedPayloadError: If the payload or its body is not valid JSON

    """
    if envelope is None or envelope.payload is None:
        raise EmptyPayloadError("Invocation returned an empty payload")

    payload = envelope.payload
    if isinstance(payload, bytes | bytearray):
        text = bytes(payload).decode("utf-8", errors="replace")
    elif isinstance(payload, str):
        text = payload
    else:
        text = json.dumps(payload)

    if not text:
        raise EmptyPayloadError("Invocation returned an empty payload")

    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise MalformedPayloadError("Unable to parse payload", raw=text) from exc

    if isinstance(parsed, Mapping) and "body" in parsed:
        body = parsed["body"]
    else:
        body = parsed

    if not isinstance(body, str):
        return body

    try:
        return json.loads(body)
    except ValueError as exc:
        raise MalformedPayloadError("Unable to parse body", raw=body) from exc


def decode_invocation_result(
    envelope: InvocationEnvelope | None, test_unit: TestUnit
) -> InvocationResult:
    """Decode an invocation response into an InvocationResult.

    A plain string body (returned for rejected requests) becomes a failed
    result carrying that string. The unit echoed by the sandbox takes
    precedence over ``test_unit``.
    """
    payload = decode_payload(envelope)

    if isinstance(payload, str):
        return InvocationResult.failed(test_unit=test_unit, error=payload)

    try:
        body = SandboxResponseBody.model_validate(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(
            "Payload does not match the response schema",
            raw=json.dumps(payload, default=str),
        ) from exc

    unit = body.test_match or test_unit
    if body.success:
        return InvocationResult.passed(
            test_unit=unit, duration_ms=body.duration or 0, stats=body.stats
        )
    return InvocationResult.failed(
        test_unit=unit,
        error=body.error or "Test failed without an error message",
        stack=body.stack,
        stats=body.stats,
    )


def encode_response(
    status_code: int, body: SandboxResponseBody | str
) -> dict[str, Any]:
    """Build the sandbox response envelope with a JSON-serialized body."""
    if isinstance(body, SandboxResponseBody):
        content = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        content = body
    return {"statusCode": status_code, "body": json.dumps(content)}

"""Tests for the payload codec."""

import json

import pytest

from playwright_serverless.codec import (
    EmptyPayloadError,
    MalformedPayloadError,
    decode_invocation_result,
    decode_payload,
    encode_response,
)
from playwright_serverless.models.invocation import InvocationEnvelope
from playwright_serverless.models.result import SandboxResponseBody
from playwright_serverless.testing.payloads import (
    failure_response,
    stats_payload,
    success_response,
)


class TestDecodePayload:
    """Tests for decode_payload."""

    def test_round_trips_body_wrapped_as_string(self) -> None:
        """Decodes a JSON body wrapped as a string inside a body field."""
        original = {"success": True, "duration": 120, "testMatch": "/app/E2E/a.test.py"}
        envelope = InvocationEnvelope(payload={"body": json.dumps(original)})

        assert decode_payload(envelope) == original

    def test_decodes_bytes_payload(self) -> None:
        """Decodes a raw bytes payload as UTF-8 JSON."""
        payload = json.dumps(success_response(duration=42)).encode()

        result = decode_payload(InvocationEnvelope(payload=payload))

        assert result["duration"] == 42
        assert result["success"] is True

    def test_decodes_string_payload(self) -> None:
        """Decodes a JSON text payload."""
        payload = json.dumps({"statusCode": 200, "body": json.dumps({"a": 1})})

        assert decode_payload(InvocationEnvelope(payload=payload)) == {"a": 1}

    def test_returns_structured_body_as_is(self) -> None:
        """Returns a body that is already structured without reparsing."""
        envelope = InvocationEnvelope(payload={"body": {"success": True}})

        assert decode_payload(envelope) == {"success": True}

    def test_uses_whole_payload_when_no_body_field(self) -> None:
        """Treats the whole parsed payload as the body when there is none."""
        envelope = InvocationEnvelope(payload=b'{"success": false, "error": "boom"}')

        assert decode_payload(envelope) == {"success": False, "error": "boom"}

    def test_unwraps_double_encoded_string_body(self) -> None:
        """Parses a body that is a JSON-encoded string once more."""
        envelope = InvocationEnvelope(payload=json.dumps(json.dumps({"a": 1})))

        assert decode_payload(envelope) == {"a": 1}

    @pytest.mark.parametrize("envelope", [None, InvocationEnvelope(payload=None)])
    def test_raises_for_missing_payload(self, envelope: InvocationEnvelope | None) -> None:
        """Raises EmptyPayloadError when the envelope has no payload."""
        with pytest.raises(EmptyPayloadError):
            decode_payload(envelope)

    @pytest.mark.parametrize("payload", [b"", ""])
    def test_raises_empty_not_malformed_for_zero_length(
        self, payload: bytes | str
    ) -> None:
        """Zero-length text is reported as empty rather than malformed."""
        with pytest.raises(EmptyPayloadError) as exc_info:
            decode_payload(InvocationEnvelope(payload=payload))

        assert not isinstance(exc_info.value, MalformedPayloadError)

    def test_raises_for_non_json_text(self) -> None:
        """Raises MalformedPayloadError carrying the raw text."""
        with pytest.raises(MalformedPayloadError) as exc_info:
            decode_payload(InvocationEnvelope(payload="not-json{"))

        assert exc_info.value.raw == "not-json{"
        assert "not-json{" in str(exc_info.value)

    def test_raises_for_non_json_body(self) -> None:
        """Raises MalformedPayloadError carrying the raw body text."""
        envelope = InvocationEnvelope(payload={"body": "<html>502</html>"})

        with pytest.raises(MalformedPayloadError) as exc_info:
            decode_payload(envelope)

        assert exc_info.value.raw == "<html>502</html>"


class TestDecodeInvocationResult:
    """Tests for decode_invocation_result."""

    def test_decodes_success(self) -> None:
        """Builds a passed result echoing the sandbox test unit."""
        envelope = InvocationEnvelope(
            payload=success_response(test_match="/app/E2E/b.test.py", duration=900)
        )

        result = decode_invocation_result(envelope, "/app/E2E/other.test.py")

        assert result.success is True
        assert result.duration_ms == 900
        assert result.test_unit == "/app/E2E/b.test.py"

    def test_decodes_failure_with_request_unit_fallback(self) -> None:
        """Uses the request unit when the sandbox does not echo one."""
        envelope = InvocationEnvelope(
            payload=failure_response(test_match=None, error="Timeout 30000ms")
        )

        result = decode_invocation_result(envelope, "/app/E2E/c.test.py")

        assert result.success is False
        assert result.error == "Timeout 30000ms"
        assert result.stack is not None
        assert result.test_unit == "/app/E2E/c.test.py"

    def test_decodes_rejected_request_string_body(self) -> None:
        """Turns a plain string body into a failed result."""
        envelope = InvocationEnvelope(
            payload=encode_response(400, "Property 'testMatch' not found.")
        )

        result = decode_invocation_result(envelope, "/app/E2E/d.test.py")

        assert result.success is False
        assert result.error == "Property 'testMatch' not found."

    def test_keeps_reported_stats(self) -> None:
        """Keeps counters reported by the sandbox."""
        envelope = InvocationEnvelope(
            payload=success_response(stats=stats_payload(passed=3, total=4, pending=1))
        )

        result = decode_invocation_result(envelope, "/app/E2E/a.test.py")

        assert result.stats is not None
        assert result.stats.num_passed_tests == 3
        assert result.stats.num_pending_tests == 1

    def test_accepts_body_without_schema_version(self) -> None:
        """Accepts bodies predating the schema version field."""
        body = {"success": True, "duration": 10, "testMatch": "/app/E2E/a.test.py"}
        envelope = InvocationEnvelope(payload={"body": json.dumps(body)})

        result = decode_invocation_result(envelope, "/app/E2E/a.test.py")

        assert result.success is True

    @pytest.mark.parametrize(
        "body",
        [
            {"schemaVersion": 2, "success": True, "duration": 1},
            {"duration": 1},
            {"success": True, "duration": -5},
            [1, 2, 3],
        ],
    )
    def test_raises_for_schema_violation(self, body: object) -> None:
        """Raises MalformedPayloadError when the body violates the schema."""
        envelope = InvocationEnvelope(payload={"body": json.dumps(body)})

        with pytest.raises(MalformedPayloadError):
            decode_invocation_result(envelope, "/app/E2E/a.test.py")


class TestEncodeResponse:
    """Tests for encode_response."""

    def test_encodes_model_with_camel_case_keys(self) -> None:
        """Serializes the body with wire keys and drops unset fields."""
        response = encode_response(
            200,
            SandboxResponseBody(success=True, duration=5, test_match="E2E/a.test.py"),
        )

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {
            "schemaVersion": 1,
            "success": True,
            "duration": 5,
            "testMatch": "E2E/a.test.py",
        }

    def test_encodes_plain_string(self) -> None:
        """Serializes a string body as a JSON string."""
        response = encode_response(400, "missing")

        assert response == {"statusCode": 400, "body": '"missing"'}

"""Tests for response envelope decoding."""

import json

import pytest

from cube.errors import ResponseParseError
from cube.schemas import EnvelopeData, ResponseEnvelope, decode_envelope
from tests.helpers import error_envelope, success_envelope


class TestDecodeEnvelope:
    """Tests for decode_envelope."""

    def test_success_envelope(self):
        body = json.dumps(success_envelope("a/b.png", url="https://cdn.test/b", file_id="f1"))

        envelope = decode_envelope(body)

        assert envelope.is_success
        assert envelope.payload == EnvelopeData(
            object_key="a/b.png", url="https://cdn.test/b", file_id="f1"
        )

    def test_failure_envelope(self):
        envelope = decode_envelope(json.dumps(error_envelope(403, "forbidden")).encode())

        assert not envelope.is_success
        assert envelope.code == 403
        assert envelope.msg == "forbidden"

    def test_missing_data_gives_empty_payload(self):
        envelope = decode_envelope(b'{"code": 200}')

        assert envelope.msg == ""
        assert envelope.payload.object_key == ""

    def test_partial_data_fields_default_to_empty(self):
        envelope = decode_envelope(b'{"code": 200, "data": {"object_key": "k"}}')

        assert envelope.payload.url == ""
        assert envelope.payload.file_id == ""

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b"[]",
            b'{"msg": "no code"}',
            b'{"code": "abc"}',
            b'{"code": "200", "data": {"object_key": "k"}}',
            b'{"code": 200.5}',
        ],
    )
    def test_invalid_bodies(self, body):
        with pytest.raises(ResponseParseError) as exc_info:
            decode_envelope(body)

        assert exc_info.value.body == body.decode()

    def test_envelope_model_round_trip(self):
        envelope = ResponseEnvelope(code=200, msg="ok", data=EnvelopeData(object_key="k"))
        assert decode_envelope(envelope.model_dump_json()) == envelope

"""Tests for the JSON envelope helpers."""
import json

import pytest
from pydantic import BaseModel

from filedrop.envelope import Envelope, InvalidJSON, decode_json, error_json, write_json


class Payload(BaseModel):
    foo: str = ""


class TestDecodeJSON:
    """decode_json mirrors what read_json does with a request body."""

    def test_good_json(self):
        assert decode_json(b'{"foo": "bar"}', Payload).foo == "bar"

    @pytest.mark.parametrize("body,message", [
        (b"foo=bar", "Syntax error: (at character: 0)"),
        (b'{"foo": }', "Syntax error: (at character: 8)"),
        (b"{bar: 404}", "Syntax error: (at character: 1)"),
        (b'{"foo": bar"}', "Syntax error: (at character: 8)"),
        (b'{"foo": "bar"', "JSON ended unexpectedly, badly-formed JSON"),
        (b'{"foo": 404}', 'Invalid JSON type for the field: "foo"'),
        (b'{"foo": "1"}{"bar", "2"}', "Body must contain only one JSON value"),
        (b'{"bar": "soda"}', 'JSON contains unknown key: "bar"'),
        (b"", "Empty body"),
        (b"   \n", "Empty body"),
    ])
    def test_invalid_json(self, body, message):
        with pytest.raises(InvalidJSON) as exc_info:
            decode_json(body, Payload)
        assert str(exc_info.value) == message

    def test_allow_unknown_fields(self):
        result = decode_json(b'{"bar": 404}', Payload, allow_unknown_fields=True)
        assert result.foo == ""

    def test_too_large(self):
        with pytest.raises(InvalidJSON) as exc_info:
            decode_json(b'{"foo": "bar"}', Payload, max_bytes=12)
        assert str(exc_info.value) == "JSON too big! must be limited to 12 bytes"

    def test_trailing_whitespace_is_fine(self):
        assert decode_json(b'  {"foo": "x"}\n\n', Payload).foo == "x"

    def test_missing_required_field(self):
        class Required(BaseModel):
            name: str

        with pytest.raises(InvalidJSON) as exc_info:
            decode_json(b"{}", Required)
        assert str(exc_info.value) == 'Missing JSON field: "name"'

    def test_invalid_utf8(self):
        with pytest.raises(InvalidJSON):
            decode_json(b'{"foo": "\xff"}', Payload)


class TestWriteJSON:
    def test_envelope_without_data_omits_key(self):
        response = write_json(Envelope(message="high hopes"))

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert json.loads(response.body) == {"error": False, "message": "high hopes"}

    def test_envelope_with_data(self):
        response = write_json(Envelope(message="ok", data={"n": 1}), status_code=201)

        assert response.status_code == 201
        assert json.loads(response.body)["data"] == {"n": 1}

    def test_extra_headers(self):
        response = write_json({"a": 1}, headers={"Foo": ["1", "2"], "Bar": "3"})

        assert response.headers.getlist("foo") == ["1", "2"]
        assert response.headers["bar"] == "3"

    def test_plain_data(self):
        response = write_json([1, 2, 3])
        assert json.loads(response.body) == [1, 2, 3]


class TestErrorJSON:
    def test_default_status(self):
        response = error_json(ValueError("bad input"))

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": True, "message": "bad input"}

    def test_custom_status(self):
        response = error_json("What you seek is not here!", status_code=503)

        assert response.status_code == 503
        assert json.loads(response.body)["error"] is True

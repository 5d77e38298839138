"""Tests for decoding change ops."""

import pytest

from cypherops.errors import OpDecodeError
from cypherops.models import ChangeOp
from cypherops.parsing.decoder import OpDecoder


@pytest.fixture
def decoder(config):
    """Create an op decoder with the default settings."""
    return OpDecoder(config)


def test_parse_write_op(decoder):
    """Test decoding a write op into a ParsedOp."""
    op = decoder.parse_op({"key": "/components/a", "type": "put", "value": '{"b": 1, "a": [2]}'}, 4)

    assert op.index == 4
    assert op.ref == "/components/a"
    assert op.properties == {"b": 1, "a": [2]}
    assert list(op.properties) == ["b", "a"]


def test_parse_non_write_op(decoder):
    """Test that non-write ops decode to nothing."""
    assert decoder.parse_op({"key": "/components/a", "type": "del"}, 0) is None


def test_parse_ops_keeps_positions(decoder):
    """Test that parsed ops remember their place in the batch."""
    ops = [
        {"key": "/components/a", "type": "del"},
        {"key": "/components/b", "type": "put", "value": "{}"},
        ChangeOp(key="/components/c", type="write", value='{"x": null}'),
    ]
    parsed = decoder.parse_ops(ops)

    assert [(op.index, op.ref) for op in parsed] == [(1, "/components/b"), (2, "/components/c")]
    assert parsed[1].properties == {"x": None}


def test_parse_ops_accepts_generators(decoder):
    """Test that any iterable of ops works."""
    ops = ({"key": f"/components/{i}", "type": "put", "value": "{}"} for i in range(3))
    assert len(decoder.parse_ops(ops)) == 3


@pytest.mark.parametrize(
    "value",
    ["{nope", "", "42", "\"text\"", "[]", "{\"n\": NaN}", "{\"n\": Infinity}", "[-Infinity]"],
)
def test_bad_payloads(decoder, value):
    """Test that payloads which are not JSON objects are rejected."""
    with pytest.raises(OpDecodeError) as exc_info:
        decoder.parse_op({"key": "/components/a", "type": "put", "value": value}, 2)

    assert exc_info.value.key == "/components/a"
    assert exc_info.value.index == 2
    assert "/components/a" in str(exc_info.value)


def test_invalid_op_shape(decoder):
    """Test that something other than an op mapping is rejected."""
    with pytest.raises(OpDecodeError):
        decoder.parse_op("not an op", 0)


def test_null_payload_has_no_properties(decoder):
    """Test that a null payload is decoded as an empty property set."""
    op = decoder.parse_op({"key": "/components/a", "type": "put", "value": "null"}, 0)
    assert op.properties == {}


def test_deeply_nested_payload(decoder):
    """Test that exceeding the recursion limit is reported as a decode error."""
    depth = 1000000
    value = '{"a": ' + "[" * depth + "]" * depth + "}"
    with pytest.raises(OpDecodeError) as exc_info:
        decoder.parse_op({"key": "/components/a", "type": "put", "value": value}, 0)
    assert isinstance(exc_info.value.__cause__, RecursionError)

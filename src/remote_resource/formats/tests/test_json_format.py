import datetime
import decimal
import json

import pytest


@pytest.fixture
def target():
    from ..json_format import JSONFormat

    return JSONFormat()


def test_identity(target):
    assert target.extension == "json"
    assert target.mime_type == "application/json"


def test_decode_removes_root(target):
    assert target.decode('{"person": {"name": "Matz"}}') == {"name": "Matz"}


def test_decode_keeps_root_on_request(target):
    assert target.decode('{"person": {"name": "Matz"}}', remove_root=False) == {
        "person": {"name": "Matz"}
    }


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ('{"people": [{"id": 1}, {"id": 2}]}', [{"id": 1}, {"id": 2}]),
        ('{"count": 1}', {"count": 1}),
        ('{"a": {"b": 1}, "c": 2}', {"a": {"b": 1}, "c": 2}),
        ("[1, 2]", [1, 2]),
    ],
)
def test_decode_root_removal_needs_a_single_structured_value(target, input, expected):
    assert target.decode(input) == expected


def test_decode_bytes(target):
    assert target.decode(b'{"person": {"name": "\xc3\xa9"}}') == {"name": "é"}


@pytest.mark.parametrize("input", [None, "", b"", "  \n"])
def test_decode_nothing(target, input):
    assert target.decode(input) is None


def test_encode_with_root(target):
    assert json.loads(target.encode({"name": "Matz"}, root="person")) == {
        "person": {"name": "Matz"}
    }


def test_encode_without_root(target):
    assert json.loads(target.encode({"name": "Matz"})) == {"name": "Matz"}


def test_encode_scalars(target):
    result = json.loads(
        target.encode(
            {
                "born_on": datetime.date(1965, 4, 14),
                "updated_at": datetime.datetime(2020, 1, 2, 3, 4, 5),
                "price": decimal.Decimal("1.50"),
                "avatar": b"\x00\x01",
            }
        )
    )
    assert result == {
        "born_on": "1965-04-14",
        "updated_at": "2020-01-02T03:04:05",
        "price": "1.50",
        "avatar": "AAE=",
    }


def test_encode_objects_with_to_dict(target):
    class Thing:
        def to_dict(self):
            return {"a": 1}

    assert json.loads(target.encode([Thing()])) == [{"a": 1}]

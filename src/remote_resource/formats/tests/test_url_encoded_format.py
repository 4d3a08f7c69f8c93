import datetime

import pytest


@pytest.fixture
def target():
    from ..url_encoded_format import UrlEncodedFormat

    return UrlEncodedFormat()


def test_identity(target):
    assert target.extension == ""
    assert target.mime_type == "application/x-www-form-urlencoded"


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ("a=1", {"a": "1"}),
        ("?a=1", {"a": "1"}),
        ("a[]=1&a[]=2", {"a": ["1", "2"]}),
        ("a%5B%5D=1&a%5B%5D=2", {"a": ["1", "2"]}),
        ("a[b]=1&a[c][d]=2", {"a": {"b": "1", "c": {"d": "2"}}}),
        ("a[][b]=1&a[][c]=2&a[][b]=3", {"a": [{"b": "1", "c": "2"}, {"b": "3"}]}),
        ("a=1;b=hello+world", {"a": "1", "b": "hello world"}),
        ("a=&b", {"a": "", "b": ""}),
        ("", {}),
    ],
)
def test_decode_nested(target, input, expected):
    assert target.decode(input) == expected


def test_decode_never_removes_root(target):
    assert target.decode("person[name]=Matz") == {"person": {"name": "Matz"}}


def test_decode_bytes(target):
    assert target.decode(b"a=1") == {"a": "1"}


def test_decode_conflicting_shapes(target):
    with pytest.raises(ValueError):
        target.decode("a=1&a[b]=2")


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ("a=1", {"a": "1"}),
        ("?a=1", {"a": "1"}),
        ("a=1&a=2", {"a": "2"}),
        ("a[]=1&a[]=2", {"a[]": "2"}),
    ],
)
def test_decode_flat(input, expected):
    from ..url_encoded_format import UrlEncodedFormat

    assert UrlEncodedFormat(query_parser="flat").decode(input) == expected


def test_decode_parser_per_call(target):
    assert target.decode("a[]=1", query_parser="flat") == {"a[]": "1"}


def test_decode_parser_from_settings(monkeypatch, target):
    from ...config import get_settings

    monkeypatch.setenv("REMOTE_RESOURCE_QUERY_PARSER", "flat")
    get_settings.cache_clear()
    try:
        assert target.decode("a[]=1") == {"a[]": "1"}
    finally:
        get_settings.cache_clear()


def test_unknown_parser():
    from ..url_encoded_format import UrlEncodedFormat

    with pytest.raises(ValueError):
        UrlEncodedFormat(query_parser="loose")


def test_encode(target):
    assert target.encode({"b": 2, "a": 1, "c": [3, 4]}) == "a=1&b=2&c%5B%5D=3&c%5B%5D=4"


def test_encode_with_root(target):
    assert target.encode({"name": "Matz", "age": 58}, root="person") == (
        "person%5Bage%5D=58&person%5Bname%5D=Matz"
    )


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ({"a": None}, "a="),
        ({"a": True, "b": False}, "a=true&b=false"),
        ({"a": "x y&z"}, "a=x+y%26z"),
        ({"a": []}, ""),
        ({"a": {}}, ""),
        ({"a": [[]]}, "a%5B%5D%5B%5D="),
        ({"d": datetime.date(2020, 1, 2)}, "d=2020-01-02"),
        ({"a": [{"b": 1, "c": 2}]}, "a%5B%5D%5Bb%5D=1&a%5B%5D%5Bc%5D=2"),
    ],
)
def test_to_query(input, expected):
    from ..url_encoded_format import to_query

    assert to_query(input) == expected


def test_to_query_needs_a_key():
    from ..url_encoded_format import to_query

    with pytest.raises(TypeError):
        to_query([1, 2])


def test_encode_then_decode(target):
    value = {"person": {"name": "Matz", "tags": ["a", "b"]}}
    assert target.decode(target.encode(value)) == value

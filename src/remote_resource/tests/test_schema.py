import datetime
import decimal

import pytest


def test_builder():
    from ..schema import AttributeType, Schema, SchemaEntry

    target = Schema().string("name", "eye_color").integer("age").attribute("born_on", "date")
    assert target.entries == (
        SchemaEntry("name", AttributeType.STRING),
        SchemaEntry("eye_color", AttributeType.STRING),
        SchemaEntry("age", AttributeType.INTEGER),
        SchemaEntry("born_on", AttributeType.DATE),
    )
    assert len(target) == 4


def test_builder_redeclaration_replaces_in_place():
    from ..schema import AttributeType, Schema

    target = Schema().string("a", "b").integer("a")
    assert [(e.name, e.type) for e in target] == [
        ("a", AttributeType.INTEGER),
        ("b", AttributeType.STRING),
    ]


def test_unknown_type():
    from ..schema import Schema

    with pytest.raises(ValueError) as e:
        Schema().attribute("name", "varchar")
    assert "varchar" in str(e.value)


@pytest.mark.parametrize(
    "input",
    [
        {"name": "string", "age": "integer"},
        [("name", "string"), ("age", "INTEGER")],
    ],
)
def test_normalize_schema(input):
    from ..schema import AttributeType, SchemaEntry, normalize_schema

    assert normalize_schema(input) == (
        SchemaEntry("name", AttributeType.STRING),
        SchemaEntry("age", AttributeType.INTEGER),
    )


def test_normalize_empty():
    from ..schema import Schema, normalize_schema

    assert normalize_schema(None) == ()
    assert normalize_schema({}) == ()
    assert normalize_schema(Schema()) == ()


@pytest.mark.parametrize(
    ("type_", "input", "expected"),
    [
        ("string", 1, "1"),
        ("text", b"abc", "abc"),
        ("integer", "42", 42),
        ("integer", " 42 ", 42),
        ("integer", "42.0", 42),
        ("integer", 42.0, 42),
        ("integer", decimal.Decimal("3"), 3),
        ("float", "1.5", 1.5),
        ("float", 2, 2.0),
        ("decimal", "1.50", decimal.Decimal("1.50")),
        ("decimal", 0.1, decimal.Decimal("0.1")),
        ("boolean", "yes", True),
        ("boolean", "Off", False),
        ("boolean", "t", True),
        ("boolean", 0, False),
        ("boolean", 1, True),
        ("boolean", False, False),
        ("date", "1965-04-14", datetime.date(1965, 4, 14)),
        ("date", datetime.datetime(2020, 1, 2, 3, 4), datetime.date(2020, 1, 2)),
        ("datetime", "2020-01-02T03:04:05", datetime.datetime(2020, 1, 2, 3, 4, 5)),
        ("datetime", "2020-01-02 03:04:05", datetime.datetime(2020, 1, 2, 3, 4, 5)),
        ("datetime", "2020-01-02", datetime.datetime(2020, 1, 2)),
        ("timestamp", datetime.date(2020, 1, 2), datetime.datetime(2020, 1, 2)),
        ("time", "03:04:05", datetime.time(3, 4, 5)),
        ("binary", "abc", b"abc"),
        ("binary", bytearray(b"abc"), b"abc"),
    ],
)
def test_cast(type_, input, expected):
    from ..schema import AttributeType, cast

    assert cast(AttributeType(type_), input) == expected


@pytest.mark.parametrize("type_", ["string", "integer", "boolean", "date", "binary"])
@pytest.mark.parametrize("input", [None, "", b""])
def test_cast_nothing(type_, input):
    from ..schema import AttributeType, cast

    assert cast(AttributeType(type_), input) is None


@pytest.mark.parametrize(
    ("type_", "input"),
    [
        ("integer", "forty-two"),
        ("integer", 1.5),
        ("integer", "1.5"),
        ("integer", []),
        ("float", "abc"),
        ("boolean", "maybe"),
        ("boolean", 2),
        ("date", "not a date"),
        ("date", 20200102),
        ("binary", 1),
    ],
)
def test_cast_failure(type_, input):
    from ..schema import AttributeType, cast

    with pytest.raises((ValueError, TypeError, ArithmeticError)):
        cast(AttributeType(type_), input)

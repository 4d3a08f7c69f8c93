import collections.abc
import dataclasses
import datetime
import decimal
import enum
import typing

import aniso8601


class AttributeType(str, enum.Enum):
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME = "time"
    DATE = "date"
    BINARY = "binary"
    BOOLEAN = "boolean"

    @classmethod
    def coerce(cls, value: typing.Union[str, "AttributeType"]) -> "AttributeType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"unknown attribute type: {value!r} "
                f"(known types: {', '.join(t.value for t in cls)})"
            ) from None


@dataclasses.dataclass(frozen=True)
class SchemaEntry:
    name: str
    type: AttributeType


class Schema:
    """
    Builder for an ordered set of :py:class:`SchemaEntry`.  Every type has a
    method of its own name that takes one or more attribute names::

        Schema().string("name", "eye_color").integer("age")

    A later entry for an already-declared name replaces the earlier one in place.
    """

    _entries: typing.Dict[str, SchemaEntry]

    def attribute(self, name: str, type: typing.Union[str, AttributeType]) -> "Schema":
        entry = SchemaEntry(str(name), AttributeType.coerce(type))
        self._entries[entry.name] = entry
        return self

    def _typed(type_: AttributeType) -> typing.Callable[..., "Schema"]:  # type: ignore
        def _(self: "Schema", *names: str) -> "Schema":
            for name in names:
                self.attribute(name, type_)
            return self

        _.__name__ = type_.value
        return _

    string = _typed(AttributeType.STRING)
    text = _typed(AttributeType.TEXT)
    integer = _typed(AttributeType.INTEGER)
    float = _typed(AttributeType.FLOAT)
    decimal = _typed(AttributeType.DECIMAL)
    datetime = _typed(AttributeType.DATETIME)
    timestamp = _typed(AttributeType.TIMESTAMP)
    time = _typed(AttributeType.TIME)
    date = _typed(AttributeType.DATE)
    binary = _typed(AttributeType.BINARY)
    boolean = _typed(AttributeType.BOOLEAN)

    del _typed

    @property
    def entries(self) -> typing.Tuple[SchemaEntry, ...]:
        return tuple(self._entries.values())

    def __iter__(self) -> typing.Iterator[SchemaEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Schema({', '.join(f'{e.name}:{e.type.value}' for e in self._entries.values())})"

    def __init__(self, entries: typing.Iterable[SchemaEntry] = ()):
        self._entries = {}
        for entry in entries:
            self.attribute(entry.name, entry.type)


SchemaLike = typing.Union[
    Schema,
    typing.Mapping[str, typing.Union[str, AttributeType]],
    typing.Iterable[
        typing.Union[SchemaEntry, typing.Tuple[str, typing.Union[str, AttributeType]]]
    ],
    None,
]


def normalize_schema(schema: SchemaLike) -> typing.Tuple[SchemaEntry, ...]:
    """
    Turns any of the accepted schema declaration forms into a tuple of
    entries.  Unknown type names raise :py:class:`ValueError` before anything
    is returned, so a failed declaration never produces a partial schema.
    """
    if schema is None:
        return ()
    if isinstance(schema, Schema):
        return schema.entries
    builder = Schema()
    if isinstance(schema, collections.abc.Mapping):
        for name, type_ in schema.items():
            builder.attribute(name, type_)
    else:
        for item in schema:
            if isinstance(item, SchemaEntry):
                builder.attribute(item.name, item.type)
            else:
                name, type_ = item
                builder.attribute(name, type_)
    return builder.entries


TRUTHY_LITERALS = frozenset(["true", "t", "1", "yes", "y", "on"])
FALSY_LITERALS = frozenset(["false", "f", "0", "no", "n", "off"])


def _cast_string(value: typing.Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _cast_integer(value: typing.Any) -> int:
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            value = decimal.Decimal(text)
    if isinstance(value, decimal.Decimal):
        if value != value.to_integral_value():
            raise ValueError(f"{value!r} is not an integral number")
        return int(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not an integral number")
        return int(value)
    raise TypeError(f"{type(value).__name__} cannot be read as an integer")


def _cast_float(value: typing.Any) -> float:
    return float(value.strip() if isinstance(value, str) else value)


def _cast_decimal(value: typing.Any) -> decimal.Decimal:
    if isinstance(value, decimal.Decimal):
        return value
    if isinstance(value, float):
        return decimal.Decimal(repr(value))
    if isinstance(value, str):
        return decimal.Decimal(value.strip())
    if isinstance(value, int):
        return decimal.Decimal(value)
    raise TypeError(f"{type(value).__name__} cannot be read as a decimal")


def _cast_boolean(value: typing.Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, decimal.Decimal)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        literal = value.strip().lower()
        if literal in TRUTHY_LITERALS:
            return True
        if literal in FALSY_LITERALS:
            return False
    raise ValueError(f"{value!r} is not a boolean literal")


def _cast_date(value: typing.Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return aniso8601.parse_date(value.strip())
    raise TypeError(f"{type(value).__name__} cannot be read as a date")


def _cast_datetime(value: typing.Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            return aniso8601.parse_datetime(text)
        if " " in text:
            return aniso8601.parse_datetime(text, delimiter=" ")
        return datetime.datetime.combine(aniso8601.parse_date(text), datetime.time())
    raise TypeError(f"{type(value).__name__} cannot be read as a datetime")


def _cast_time(value: typing.Any) -> datetime.time:
    if isinstance(value, datetime.datetime):
        return value.timetz()
    if isinstance(value, datetime.time):
        return value
    if isinstance(value, str):
        return aniso8601.parse_time(value.strip())
    raise TypeError(f"{type(value).__name__} cannot be read as a time")


def _cast_binary(value: typing.Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError(f"{type(value).__name__} cannot be read as binary")


_casters: typing.Mapping[AttributeType, typing.Callable[[typing.Any], typing.Any]] = {
    AttributeType.STRING: _cast_string,
    AttributeType.TEXT: _cast_string,
    AttributeType.INTEGER: _cast_integer,
    AttributeType.FLOAT: _cast_float,
    AttributeType.DECIMAL: _cast_decimal,
    AttributeType.DATETIME: _cast_datetime,
    AttributeType.TIMESTAMP: _cast_datetime,
    AttributeType.TIME: _cast_time,
    AttributeType.DATE: _cast_date,
    AttributeType.BINARY: _cast_binary,
    AttributeType.BOOLEAN: _cast_boolean,
}


def cast(type_: AttributeType, value: typing.Any) -> typing.Any:
    """
    Casts ``value`` to ``type_``.  ``None`` and empty strings are returned as
    ``None`` without consulting the caster; any other failure surfaces as the
    caster's own exception (``ValueError``, ``TypeError`` or an
    ``ArithmeticError`` such as :py:class:`decimal.InvalidOperation`).
    """
    if value is None:
        return None
    if isinstance(value, (str, bytes, bytearray)) and len(value) == 0:
        return None
    return _casters[type_](value)

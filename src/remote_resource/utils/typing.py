import collections.abc
import typing

T = typing.TypeVar("T")


def assert_not_none(value: typing.Optional[T]) -> T:
    assert value is not None
    return value


def is_structured(value: typing.Any) -> bool:
    """
    Tells if ``value`` is a mapping or a non-string sequence, i.e. something
    a codec would render as a nested structure rather than a scalar.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (collections.abc.Mapping, collections.abc.Sequence))

import collections.abc
import dataclasses
import typing
from types import MappingProxyType

from .schema import AttributeType, SchemaEntry


class AttributeSet(collections.abc.MutableMapping):
    """
    The per-instance store of attribute values, keyed by attribute name.
    Keys are always strings and keep their insertion order.
    """

    _data: typing.Dict[str, typing.Any]

    def __getitem__(self, key: str) -> typing.Any:
        return self._data[str(key)]

    def __setitem__(self, key: str, value: typing.Any) -> None:
        self._data[str(key)] = value

    def __delitem__(self, key: str) -> None:
        del self._data[str(key)]

    def __contains__(self, key: object) -> bool:
        return str(key) in self._data

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeSet):
            return self._data == other._data
        if isinstance(other, collections.abc.Mapping):
            return self._data == dict(other)
        return NotImplemented

    def copy(self) -> "AttributeSet":
        return AttributeSet(self._data)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"AttributeSet({self._data!r})"

    def __init__(self, data: typing.Optional[typing.Mapping[str, typing.Any]] = None):
        self._data = {}
        if data is not None:
            self.update(data)


@dataclasses.dataclass(frozen=True)
class AttributeAccessor:
    """
    A generated reader/writer pair for one schema entry.  Both halves go
    through the owning instance's ``read_attribute`` / ``write_attribute``,
    so that typed and untyped access share a single code path.
    """

    name: str
    type: AttributeType

    def reader(self, instance: typing.Any) -> typing.Any:
        return instance.read_attribute(self.name)

    def writer(self, instance: typing.Any, value: typing.Any) -> None:
        instance.write_attribute(self.name, value)


class AccessorTable(collections.abc.Mapping):
    """
    An immutable snapshot of a class's schema: the declared entries, the
    declared type of every name, and the accessors generated for the names
    that are not claimed by a statically defined member.

    A table is never altered after construction; a schema change builds a
    new table and swaps it in with a single assignment.
    """

    entries: typing.Tuple[SchemaEntry, ...]
    types: typing.Mapping[str, AttributeType]
    _accessors: typing.Mapping[str, AttributeAccessor]

    @classmethod
    def build(
        cls,
        entries: typing.Iterable[SchemaEntry],
        is_static_member: typing.Callable[[str], bool],
    ) -> "AccessorTable":
        entries = tuple(entries)
        accessors = {
            entry.name: AttributeAccessor(entry.name, entry.type)
            for entry in entries
            if not is_static_member(entry.name)
        }
        return cls(entries, accessors)

    @property
    def declared(self) -> bool:
        return len(self.entries) > 0

    def __getitem__(self, name: str) -> AttributeAccessor:
        return self._accessors[name]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._accessors)

    def __len__(self) -> int:
        return len(self._accessors)

    def __repr__(self) -> str:
        return f"AccessorTable({', '.join(self._accessors)})"

    def __init__(
        self,
        entries: typing.Tuple[SchemaEntry, ...] = (),
        accessors: typing.Optional[typing.Mapping[str, AttributeAccessor]] = None,
    ):
        self.entries = entries
        self.types = MappingProxyType({e.name: e.type for e in entries})
        self._accessors = MappingProxyType(dict(accessors or {}))


EMPTY_ACCESSOR_TABLE = AccessorTable()

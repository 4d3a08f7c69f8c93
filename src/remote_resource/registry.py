import logging
import threading
import typing

from .exceptions import RemoteResourceException
from .inflection import camelize

logger = logging.getLogger(__name__)

T = typing.TypeVar("T")


class ConventionRegistry(typing.Generic[T]):
    """
    A registry whose entries are looked up by a symbolic name transformed
    through a naming convention: the name is camelized (honoring registered
    acronyms) and suffixed, so that ``"json"`` resolves to the entry
    registered as ``"JSONFormat"``.

    Nothing is synthesized for a missing identifier; the lookup fails with
    ``error_class(name, identifier)`` so that callers see exactly which
    identifier was expected.
    """

    suffix: str
    entry_type: typing.Type[T]
    error_class: typing.Callable[[str, str], RemoteResourceException]
    _entries: typing.Dict[str, T]
    _lock: threading.RLock

    def identifier_for(self, name: str) -> str:
        return camelize(name) + self.suffix

    def register(self, entry: T, identifier: typing.Optional[str] = None) -> T:
        if identifier is None:
            identifier = type(entry).__name__
        with self._lock:
            self._entries[identifier] = entry
        logger.debug("registered %r as %s", entry, identifier)
        return entry

    def unregister(self, identifier: str) -> typing.Optional[T]:
        with self._lock:
            return self._entries.pop(identifier, None)

    def lookup(self, name: typing.Union[str, T]) -> T:
        if isinstance(name, self.entry_type):
            return name
        identifier = self.identifier_for(typing.cast(str, name))
        with self._lock:
            entry = self._entries.get(identifier)
        if entry is None:
            raise self.error_class(typing.cast(str, name), identifier)
        return entry

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __iter__(self) -> typing.Iterator[str]:
        return iter(list(self._entries))

    def __init__(
        self,
        entry_type: typing.Type[T],
        suffix: str,
        error_class: typing.Callable[[str, str], RemoteResourceException],
    ):
        self.entry_type = entry_type
        self.suffix = suffix
        self.error_class = error_class
        self._entries = {}
        self._lock = threading.RLock()


_resource_classes: typing.Dict[str, type] = {}


def register_resource_class(cls: type) -> None:
    """
    Makes ``cls`` resolvable by its bare class name from anywhere, which is
    the last resort when an association target or a nested payload type is
    looked up by name.
    """
    _resource_classes[cls.__name__] = cls


def lookup_resource_class(name: str) -> typing.Optional[type]:
    return _resource_classes.get(name)

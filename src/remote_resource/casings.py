import typing

from .exceptions import UnknownCasingError
from .inflection import camelize, underscore
from .registry import ConventionRegistry


class NoneCasing:
    """
    Leaves attribute names untouched in both directions.
    """

    def encode_key(self, key: str) -> str:
        return key

    def decode_key(self, key: str) -> str:
        return key

    def encode(self, attributes: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
        return {self.encode_key(str(k)): v for k, v in attributes.items()}

    def decode(self, attributes: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
        return {self.decode_key(str(k)): v for k, v in attributes.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class UnderscoreCasing(NoneCasing):
    def encode_key(self, key: str) -> str:
        return underscore(key)

    def decode_key(self, key: str) -> str:
        return underscore(key)


class CamelcaseCasing(UnderscoreCasing):
    """
    Names are underscored when read off the wire and camel-cased when
    written back, lower camel case (``firstName``) by default.
    """

    uppercase_first: bool

    def encode_key(self, key: str) -> str:
        return camelize(key, self.uppercase_first)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uppercase_first={self.uppercase_first!r})"

    def __init__(self, uppercase_first: bool = False):
        self.uppercase_first = uppercase_first


Casing = NoneCasing

registry: ConventionRegistry[Casing] = ConventionRegistry(NoneCasing, "Casing", UnknownCasingError)
registry.register(NoneCasing())
registry.register(UnderscoreCasing())
registry.register(CamelcaseCasing())


def lookup(name: typing.Union[str, Casing]) -> Casing:
    return registry.lookup(name)

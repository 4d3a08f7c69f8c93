import typing

from ..exceptions import UnknownFormatError
from ..registry import ConventionRegistry
from .base import Format, remove_root  # noqa
from .json_format import JSONFormat
from .url_encoded_format import UrlEncodedFormat
from .xml_format import XMLFormat

FormatRegistry = ConventionRegistry[Format]

registry: FormatRegistry = ConventionRegistry(Format, "Format", UnknownFormatError)


def lookup(name: typing.Union[str, Format]) -> Format:
    """
    Resolves ``name`` to a registered codec: ``"json"`` resolves to the codec
    registered as ``JSONFormat`` and ``"msgpack"`` to ``MsgpackFormat``.
    A :py:class:`Format` instance is returned unchanged.

    :raises UnknownFormatError: when nothing is registered under the derived identifier.
    """
    return registry.lookup(name)


def register(format: Format, identifier: typing.Optional[str] = None) -> Format:
    """
    Registers ``format`` under ``identifier``, which defaults to the class name
    of the codec.
    """
    return registry.register(format, identifier)


def unregister(identifier: str) -> typing.Optional[Format]:
    return registry.unregister(identifier)


register(JSONFormat())
register(XMLFormat())
register(UrlEncodedFormat())

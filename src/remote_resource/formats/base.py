import abc
import collections.abc
import typing

from ..utils import is_structured

WireData = typing.Union[str, bytes]


def remove_root(data: typing.Any) -> typing.Any:
    """
    Strips the enclosing key of ``data`` when it is a mapping of exactly one
    key whose value is itself a mapping or a sequence, e.g.
    ``{"person": {"name": "Matz"}}`` becomes ``{"name": "Matz"}``.
    Anything else is returned as is.
    """
    if isinstance(data, collections.abc.Mapping) and len(data) == 1:
        (value,) = data.values()
        if is_structured(value):
            return value
    return data


class Format(metaclass=abc.ABCMeta):
    """
    A codec for one wire format.
    """

    extension: typing.ClassVar[str]
    mime_type: typing.ClassVar[str]

    @abc.abstractmethod
    def encode(self, value: typing.Any, **options: typing.Any) -> str:
        ...  # pragma: nocover

    @abc.abstractmethod
    def _decode(self, data: str) -> typing.Any:
        ...  # pragma: nocover

    def decode(self, data: typing.Optional[WireData], remove_root: bool = True) -> typing.Any:
        """
        Decodes ``data`` into plain Python structures.

        :param data: the wire payload.  ``None`` decodes to ``None``.
        :param bool remove_root: strips a single enclosing root key from the
            result when set.  Pass ``False`` to receive the envelope as is.
        """
        if data is None:
            return None
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        decoded = self._decode(data)
        return _remove_root(decoded) if remove_root else decoded

    def __repr__(self) -> str:
        return f"<{type(self).__name__} mime_type={self.mime_type!r}>"


_remove_root = remove_root

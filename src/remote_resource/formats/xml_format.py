"""
XML codec following the conventional hash-to-element mapping: nested
mappings become child elements, sequences become a ``type="array"`` element
holding one singular-named child per item, and non-string scalars carry a
``type`` attribute so that they survive the round trip.
"""

import base64
import collections.abc
import datetime
import decimal
import typing
import xml.etree.ElementTree as ET

import aniso8601

from ..inflection import dasherize, singularize
from ..utils import is_structured
from .base import Format

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _to_plain(value: typing.Any) -> typing.Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return value


def _scalar_type_and_text(value: typing.Any) -> typing.Tuple[typing.Optional[str], str]:
    if isinstance(value, bool):
        return "boolean", "true" if value else "false"
    if isinstance(value, int):
        return "integer", str(value)
    if isinstance(value, float):
        return "float", repr(value)
    if isinstance(value, decimal.Decimal):
        return "decimal", str(value)
    if isinstance(value, datetime.datetime):
        return "datetime", value.isoformat()
    if isinstance(value, datetime.date):
        return "date", value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return "base64Binary", base64.b64encode(value).decode("ascii")
    if isinstance(value, datetime.time):
        return None, value.isoformat()
    return None, str(value)


def _nonempty(fn: typing.Callable[[str], typing.Any]) -> typing.Callable[[str], typing.Any]:
    def _(text: str) -> typing.Any:
        text = text.strip()
        return fn(text) if text else None

    return _


_casters: typing.Mapping[str, typing.Callable[[str], typing.Any]] = {
    "integer": _nonempty(int),
    "float": _nonempty(float),
    "double": _nonempty(float),
    "decimal": _nonempty(decimal.Decimal),
    "boolean": _nonempty(lambda text: text.lower() in ("true", "1")),
    "date": _nonempty(aniso8601.parse_date),
    "datetime": _nonempty(aniso8601.parse_datetime),
    "dateTime": _nonempty(aniso8601.parse_datetime),
    "base64Binary": _nonempty(base64.b64decode),
    "string": lambda text: text,
    "symbol": _nonempty(lambda text: text),
}


class XMLFormat(Format):
    extension = "xml"
    mime_type = "application/xml"

    def _build_element(self, name: str, value: typing.Any) -> ET.Element:
        elem = ET.Element(dasherize(name))
        value = _to_plain(value)
        if value is None:
            elem.set("nil", "true")
        elif isinstance(value, collections.abc.Mapping):
            for k, v in value.items():
                elem.append(self._build_element(str(k), v))
        elif is_structured(value):
            elem.set("type", "array")
            child_name = singularize(name)
            for item in value:
                elem.append(self._build_element(child_name, item))
        else:
            type_, text = _scalar_type_and_text(value)
            if type_ is not None:
                elem.set("type", type_)
            elem.text = text
        return elem

    def encode(
        self, value: typing.Any, root: typing.Optional[str] = None, **options: typing.Any
    ) -> str:
        value = _to_plain(value)
        if root is None:
            root = "hash" if isinstance(value, collections.abc.Mapping) else "objects"
        elem = self._build_element(root, value)
        return XML_DECLARATION + ET.tostring(elem, encoding="unicode")

    def _element_value(self, elem: ET.Element) -> typing.Any:
        if elem.get("nil") == "true":
            return None
        type_ = elem.get("type")
        if type_ == "array":
            return [self._element_value(child) for child in elem]
        children = list(elem)
        if children:
            result: typing.Dict[str, typing.Any] = {}
            repeated: typing.Set[str] = set()
            for child in children:
                key = child.tag.replace("-", "_")
                value = self._element_value(child)
                if key in repeated:
                    result[key].append(value)
                elif key in result:
                    result[key] = [result[key], value]
                    repeated.add(key)
                else:
                    result[key] = value
            return result
        text = elem.text or ""
        if type_ is None:
            return text if text.strip() else None
        caster = _casters.get(type_)
        if caster is None:
            return text
        return caster(text)

    def _decode(self, data: str) -> typing.Any:
        if not data.strip():
            return None
        root = ET.fromstring(data.encode("utf-8"))
        return {root.tag.replace("-", "_"): self._element_value(root)}

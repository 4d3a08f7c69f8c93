import collections.abc
import re
import typing
from urllib.parse import parse_qsl, quote_plus, unquote_plus

from ..config import get_settings
from ..utils import is_structured
from .base import Format, WireData

QUERY_PARSERS = ("nested", "flat")


def _to_param(value: typing.Any) -> str:
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    return str(value)


def _escape(value: str) -> str:
    return quote_plus(value, safe="")


def to_query(value: typing.Any, namespace: typing.Optional[str] = None) -> str:
    """
    Renders ``value`` as a query string with the bracket convention:
    ``{"a": {"b": 1}, "c": [2, 3]}`` becomes ``a%5Bb%5D=1&c%5B%5D=2&c%5B%5D=3``.
    Keys of a mapping are emitted in sorted order, and empty containers are
    omitted except at the top of an array.
    """
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        value = to_dict()
    if isinstance(value, collections.abc.Mapping):
        parts = [
            to_query(v, f"{namespace}[{k}]" if namespace else str(k))
            for k, v in value.items()
            if not (is_structured(v) and len(v) == 0)
        ]
        if namespace is None or "[]" not in namespace:
            parts.sort()
        return "&".join(parts)
    if namespace is None:
        raise TypeError(f"cannot render {type(value).__name__} as a query without a key")
    if is_structured(value):
        prefix = f"{namespace}[]"
        if not value:
            return f"{_escape(prefix)}="
        return "&".join(to_query(item, prefix) for item in value)
    return f"{_escape(namespace)}={_escape(_to_param(value))}"


_key_head_re = re.compile(r"\A[\[\]]*([^\[\]]+)\]*")
_array_of_hashes_re = re.compile(r"\A\[\]\[([^\[\]]+)\]\Z")
_array_of_nested_re = re.compile(r"\A\[\](.+)\Z")


def _has_key_path(params: typing.Mapping[str, typing.Any], key: str) -> bool:
    if "[]" in key:
        return False
    current: typing.Any = params
    for part in re.split(r"[\[\]]+", key):
        if part == "":
            continue
        if not isinstance(current, dict) or part not in current:
            return False
        current = current[part]
    return True


def _expect(container: typing.Any, type_: type, key: str) -> None:
    if not isinstance(container, type_):
        raise ValueError(
            f"expected {type_.__name__} (got {type(container).__name__}) for param `{key}'"
        )


def _normalize_params(params: typing.Dict[str, typing.Any], name: str, value: str) -> None:
    m = _key_head_re.match(name)
    if m is None:
        return
    k = m.group(1)
    after = name[m.end() :]

    if after == "":
        params[k] = value
    elif after == "[":
        params[name] = value
    elif after == "[]":
        items = params.setdefault(k, [])
        _expect(items, list, k)
        items.append(value)
    else:
        m2 = _array_of_hashes_re.match(after) or _array_of_nested_re.match(after)
        if m2 is not None:
            child_key = m2.group(1)
            items = params.setdefault(k, [])
            _expect(items, list, k)
            if items and isinstance(items[-1], dict) and not _has_key_path(items[-1], child_key):
                _normalize_params(items[-1], child_key, value)
            else:
                item: typing.Dict[str, typing.Any] = {}
                _normalize_params(item, child_key, value)
                items.append(item)
        else:
            sub = params.setdefault(k, {})
            _expect(sub, dict, k)
            _normalize_params(sub, after, value)


def parse_nested_query(query: str) -> typing.Dict[str, typing.Any]:
    """
    Parses ``query`` honoring the bracket convention.  ``a[b]=1`` yields a
    nested mapping and ``a[]=1&a[]=2`` an ordered list under ``a``.
    """
    params: typing.Dict[str, typing.Any] = {}
    for pair in re.split(r"[&;]", query):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        key = unquote_plus(key)
        if not key:
            continue
        _normalize_params(params, key, unquote_plus(value))
    return params


def parse_flat_query(query: str) -> typing.Dict[str, typing.Any]:
    """
    Parses ``query`` as plain ``key=value`` pairs.  Bracketed names are kept
    literally and a key that occurs more than once keeps its last value, so
    ``a=1&a=2`` yields ``{"a": "2"}``.
    """
    return dict(parse_qsl(query, keep_blank_values=True))


_parsers: typing.Mapping[str, typing.Callable[[str], typing.Dict[str, typing.Any]]] = {
    "nested": parse_nested_query,
    "flat": parse_flat_query,
}


class UrlEncodedFormat(Format):
    extension = ""
    mime_type = "application/x-www-form-urlencoded"

    query_parser: typing.Optional[str]

    def encode(
        self, value: typing.Any, root: typing.Optional[str] = None, **options: typing.Any
    ) -> str:
        if root:
            value = {root: value}
        return to_query(value)

    def _parser(self, query_parser: typing.Optional[str]) -> typing.Callable[[str], typing.Any]:
        name = query_parser or self.query_parser or get_settings().query_parser
        try:
            return _parsers[name]
        except KeyError:
            raise ValueError(f"unknown query parser: {name!r}") from None

    def _decode(self, data: str, query_parser: typing.Optional[str] = None) -> typing.Any:
        if data.startswith("?"):
            data = data[1:]
        return self._parser(query_parser)(data)

    def decode(
        self,
        data: typing.Optional[WireData],
        remove_root: bool = True,
        query_parser: typing.Optional[str] = None,
    ) -> typing.Any:
        """
        Decodes a form payload.  Root removal never applies to forms, since
        their nesting is expressed in the key names themselves.
        """
        if data is None:
            return None
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        return self._decode(data, query_parser)

    def __init__(self, query_parser: typing.Optional[str] = None):
        if query_parser is not None and query_parser not in QUERY_PARSERS:
            raise ValueError(f"unknown query parser: {query_parser!r}")
        self.query_parser = query_parser

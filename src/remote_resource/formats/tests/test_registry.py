import pytest


def test_lookup_builtins():
    from .. import lookup
    from ..json_format import JSONFormat
    from ..url_encoded_format import UrlEncodedFormat
    from ..xml_format import XMLFormat

    assert isinstance(lookup("json"), JSONFormat)
    assert isinstance(lookup("xml"), XMLFormat)
    assert isinstance(lookup("url_encoded"), UrlEncodedFormat)


def test_lookup_instance():
    from .. import lookup
    from ..json_format import JSONFormat

    format = JSONFormat()
    assert lookup(format) is format


def test_lookup_unknown():
    from ...exceptions import UnknownFormatError
    from .. import lookup

    with pytest.raises(UnknownFormatError) as e:
        lookup("msgpack")
    assert e.value.name == "msgpack"
    assert e.value.identifier == "MsgpackFormat"
    assert "MsgpackFormat" in str(e.value)


def test_register():
    from .. import Format, lookup, register, unregister

    class MsgpackFormat(Format):
        extension = "msgpack"
        mime_type = "application/x-msgpack"

        def encode(self, value, **options):
            return repr(value)

        def _decode(self, data):
            return data

    format = MsgpackFormat()
    register(format)
    try:
        assert lookup("msgpack") is format
    finally:
        unregister("MsgpackFormat")


def test_register_with_identifier():
    from .. import lookup, register, unregister
    from ..json_format import JSONFormat

    format = JSONFormat()
    register(format, "HalJSONFormat")
    try:
        assert lookup("hal_json") is format
    finally:
        unregister("HalJSONFormat")


def test_remove_root():
    from .. import remove_root

    assert remove_root({"person": {"name": "Matz"}}) == {"name": "Matz"}
    assert remove_root({"people": [1]}) == [1]
    assert remove_root({"name": "Matz"}) == {"name": "Matz"}
    assert remove_root({"a": {}, "b": {}}) == {"a": {}, "b": {}}
    assert remove_root(["a"]) == ["a"]

import pytest


def test_lookup():
    from ..casings import CamelcaseCasing, NoneCasing, UnderscoreCasing, lookup

    assert type(lookup("none")) is NoneCasing
    assert type(lookup("underscore")) is UnderscoreCasing
    assert type(lookup("camelcase")) is CamelcaseCasing

    casing = CamelcaseCasing(uppercase_first=True)
    assert lookup(casing) is casing


def test_lookup_unknown():
    from ..casings import lookup
    from ..exceptions import UnknownCasingError

    with pytest.raises(UnknownCasingError) as e:
        lookup("kebab")
    assert e.value.identifier == "KebabCasing"


def test_none():
    from ..casings import NoneCasing

    target = NoneCasing()
    assert target.decode({"firstName": 1}) == {"firstName": 1}
    assert target.encode({"first_name": 1}) == {"first_name": 1}


def test_underscore():
    from ..casings import UnderscoreCasing

    target = UnderscoreCasing()
    assert target.decode({"firstName": 1, "LastName": 2}) == {"first_name": 1, "last_name": 2}
    assert target.encode({"firstName": 1}) == {"first_name": 1}


def test_camelcase():
    from ..casings import CamelcaseCasing

    assert CamelcaseCasing().encode({"first_name": 1}) == {"firstName": 1}
    assert CamelcaseCasing(uppercase_first=True).encode({"first_name": 1}) == {"FirstName": 1}
    assert CamelcaseCasing().decode({"firstName": {"innerKey": 1}}) == {
        "first_name": {"innerKey": 1}
    }

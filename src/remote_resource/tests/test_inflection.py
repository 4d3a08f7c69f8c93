import pytest


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ("json", "JSON"),
        ("xml", "XML"),
        ("msgpack", "Msgpack"),
        ("url_encoded", "UrlEncoded"),
        ("json_format", "JSONFormat"),
        ("person_address", "PersonAddress"),
        ("external/profile_data", "External.ProfileData"),
    ],
)
def test_camelize(input, expected):
    from ..inflection import camelize

    assert camelize(input) == expected


def test_camelize_lower_first():
    from ..inflection import camelize

    assert camelize("person_address", False) == "personAddress"
    assert camelize("first_name", uppercase_first=False) == "firstName"


@pytest.mark.parametrize(
    ("input", "expected"),
    [
        ("JSONFormat", "json_format"),
        ("XMLFormat", "xml_format"),
        ("PersonAddress", "person_address"),
        ("HTMLParser", "html_parser"),
        ("External.Person", "external/person"),
        ("first-name", "first_name"),
        ("already_underscored", "already_underscored"),
    ],
)
def test_underscore(input, expected):
    from ..inflection import underscore

    assert underscore(input) == expected


@pytest.mark.parametrize(
    ("singular", "plural"),
    [
        ("post", "posts"),
        ("person", "people"),
        ("Person", "People"),
        ("child", "children"),
        ("category", "categories"),
        ("box", "boxes"),
        ("status", "statuses"),
        ("matrix", "matrices"),
        ("mouse", "mice"),
        ("ox", "oxen"),
        ("quiz", "quizzes"),
        ("wife", "wives"),
        ("half", "halves"),
        ("sheep", "sheep"),
        ("information", "information"),
        ("series", "series"),
    ],
)
def test_pluralize(singular, plural):
    from ..inflection import pluralize

    assert pluralize(singular) == plural


@pytest.mark.parametrize(
    ("plural", "singular"),
    [
        ("posts", "post"),
        ("people", "person"),
        ("children", "child"),
        ("categories", "category"),
        ("boxes", "box"),
        ("statuses", "status"),
        ("addresses", "address"),
        ("matrices", "matrix"),
        ("mice", "mouse"),
        ("analyses", "analysis"),
        ("news", "news"),
        ("status", "status"),
        ("fish", "fish"),
    ],
)
def test_singularize(plural, singular):
    from ..inflection import singularize

    assert singularize(plural) == singular


def test_classify():
    from ..inflection import classify

    assert classify("comments") == "Comment"
    assert classify("people") == "Person"
    assert classify("billing_addresses") == "BillingAddress"
    assert classify("Blog.posts") == "Post"


def test_misc():
    from ..inflection import dasherize, demodulize, foreign_key

    assert demodulize("External.Person") == "Person"
    assert demodulize("Person") == "Person"
    assert dasherize("eye_color") == "eye-color"
    assert foreign_key("Person") == "person_id"
    assert foreign_key("External.BillingAddress") == "billing_address_id"


def test_custom_inflector():
    from ..inflection import Inflector

    target = Inflector.with_defaults()
    target.acronym("API")
    target.irregular("cactus", "cacti")
    target.uncountable("luggage")

    assert target.camelize("api_client") == "APIClient"
    assert target.underscore("APIClient") == "api_client"
    assert target.pluralize("cactus") == "cacti"
    assert target.singularize("cacti") == "cactus"
    assert target.pluralize("luggage") == "luggage"

    from ..inflection import camelize

    assert camelize("api_client") == "ApiClient"

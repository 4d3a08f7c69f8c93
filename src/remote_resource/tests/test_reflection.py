import collections

import pytest


class Outer:
    class Inner:
        pass


def test_class_name():
    from ..reflection import AssociationReflection, Macro

    assert AssociationReflection(Macro.HAS_MANY, "comments").class_name == "Comment"
    assert AssociationReflection(Macro.HAS_ONE, "billing_address").class_name == "BillingAddress"
    assert AssociationReflection("belongs_to", "people").class_name == "Person"
    assert (
        AssociationReflection(Macro.BELONGS_TO, "author", {"class_name": "writer"}).class_name
        == "Writer"
    )
    assert (
        AssociationReflection(Macro.BELONGS_TO, "author", {"class_name": "ext.Writer"}).class_name
        == "ext.Writer"
    )


def test_foreign_key():
    from ..reflection import AssociationReflection, Macro

    assert AssociationReflection(Macro.BELONGS_TO, "author").foreign_key == "author_id"
    assert (
        AssociationReflection(Macro.BELONGS_TO, "author", {"foreign_key": "writer_id"}).foreign_key
        == "writer_id"
    )


def test_options_are_immutable():
    from ..reflection import AssociationReflection

    options = {"polymorphic": True}
    target = AssociationReflection("belongs_to", "subject", options)
    options["class_name"] = "X"
    assert dict(target.options) == {"polymorphic": True}
    assert target.polymorphic
    with pytest.raises(TypeError):
        target.options["class_name"] = "Y"  # type: ignore


def test_unknown_macro():
    from ..reflection import AssociationReflection

    with pytest.raises(ValueError):
        AssociationReflection("has_and_belongs_to_many", "tags")


def test_klass_given_as_class():
    from ..reflection import AssociationReflection, Macro

    target = AssociationReflection(Macro.HAS_ONE, "thing", {"class_name": Outer})
    assert target.class_name == "Outer"
    assert target.klass is Outer


def test_klass_is_resolved_lazily():
    from ..exceptions import AssociationTargetNotFoundError
    from ..reflection import AssociationReflection, Macro

    target = AssociationReflection(Macro.HAS_ONE, "inner", owner=Outer)
    assert target.klass is Outer.Inner

    target = AssociationReflection(Macro.HAS_ONE, "missing", owner=Outer)
    with pytest.raises(AssociationTargetNotFoundError) as e:
        target.klass
    assert e.value.association == "missing"
    assert e.value.class_name == "Missing"
    assert "Missing" in str(e.value)


@pytest.mark.parametrize(
    ("name", "owner", "expected"),
    [
        ("Inner", Outer, Outer.Inner),
        ("Outer", Outer, Outer),
        ("Outer.Inner", None, None),
        ("collections.OrderedDict", None, collections.OrderedDict),
        ("NoSuchThing", Outer, None),
        ("no_such_module.Thing", None, None),
    ],
)
def test_resolve_class(name, owner, expected):
    from ..reflection import resolve_class

    assert resolve_class(name, owner) is expected


def test_resolve_registered_resource_class():
    from ..base import Resource
    from ..reflection import resolve_class

    class Registered(Resource):
        class Nested(Resource, register=False):
            pass

    class Unregistered(Resource, register=False):
        pass

    assert resolve_class("Registered") is Registered
    assert resolve_class("Registered.Nested") is Registered.Nested
    assert resolve_class("Nested") is None
    assert resolve_class("Unregistered") is None

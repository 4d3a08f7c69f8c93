import logging
import typing

from .collection import ResourceCollection
from .exceptions import InvalidOptionError
from .inflection import camelize
from .reflection import AssociationReflection, Macro
from .utils import assert_not_none

if typing.TYPE_CHECKING:
    from .base import Resource  # noqa: F401

logger = logging.getLogger(__name__)


class AssociationBuilder:
    """
    Turns one association declaration into an :py:class:`AssociationReflection`
    registered on the owner, and knows how an instance of the owner resolves
    the associated value.
    """

    macro: typing.ClassVar[Macro]
    valid_options: typing.ClassVar[typing.FrozenSet[str]] = frozenset(["class_name"])

    owner: typing.Type["Resource"]
    name: str
    options: typing.Mapping[str, typing.Any]

    @classmethod
    def validate_options(cls, options: typing.Mapping[str, typing.Any]) -> None:
        for option in options:
            if option not in cls.valid_options:
                raise InvalidOptionError(option, cls.macro.value)

    def build(self, install_accessor: bool = True) -> AssociationReflection:
        self.validate_options(self.options)
        reflection = self.owner.create_reflection(self.macro, self.name, self.options)
        if install_accessor:
            descriptor = _descriptor_classes[self.macro](**self.options)
            descriptor.name = self.name
            setattr(self.owner, self.name, descriptor)
        return reflection

    @classmethod
    def can_fetch(cls, instance: "Resource", reflection: AssociationReflection) -> bool:
        return instance.id is not None

    @classmethod
    def empty_value(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        return None

    @classmethod
    def embedded_value(
        cls, instance: "Resource", reflection: AssociationReflection, value: typing.Any
    ) -> typing.Any:
        return value

    @classmethod
    def fetch(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        raise NotImplementedError()

    @classmethod
    def read(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        """
        Returns the associated value of ``instance``: the memoized value if
        there is one, else the value embedded in the instance's attributes
        under the association name, else the result of fetching it.

        Only fetched values are memoized.
        """
        cache = instance._association_cache
        if reflection.name in cache:
            return cache[reflection.name]
        if reflection.name in instance.attributes:
            return cls.embedded_value(instance, reflection, instance.attributes[reflection.name])
        if not cls.can_fetch(instance, reflection):
            return cls.empty_value(instance, reflection)
        logger.debug("fetching association (%s) of %r", reflection.name, instance)
        value = cls.fetch(instance, reflection)
        cache[reflection.name] = value
        return value

    @staticmethod
    def owner_params(
        instance: "Resource", reflection: AssociationReflection
    ) -> typing.Dict[str, typing.Any]:
        key = reflection.options.get("foreign_key") or f"{type(instance).element_name()}_id"
        return {str(key): instance.id}

    def __init__(
        self,
        owner: typing.Type["Resource"],
        name: str,
        options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ):
        self.owner = owner
        self.name = str(name)
        self.options = dict(options or {})


class HasManyBuilder(AssociationBuilder):
    macro = Macro.HAS_MANY
    valid_options = AssociationBuilder.valid_options | {"foreign_key"}

    @classmethod
    def empty_value(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        collection = ResourceCollection(elements=[])
        collection.resource_class = typing.cast(typing.Type["Resource"], reflection.klass)
        return collection

    @classmethod
    def embedded_value(
        cls, instance: "Resource", reflection: AssociationReflection, value: typing.Any
    ) -> typing.Any:
        if value is None or isinstance(value, ResourceCollection):
            return value
        collection = ResourceCollection(elements=value)
        collection.resource_class = typing.cast(typing.Type["Resource"], reflection.klass)
        return collection

    @classmethod
    def fetch(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        target = typing.cast(typing.Type["Resource"], reflection.klass)
        return target.find_all(params=cls.owner_params(instance, reflection)).call()


class HasOneBuilder(AssociationBuilder):
    macro = Macro.HAS_ONE
    valid_options = AssociationBuilder.valid_options | {"foreign_key"}

    @classmethod
    def fetch(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        target = typing.cast(typing.Type["Resource"], reflection.klass)
        return target.find_singleton(params=cls.owner_params(instance, reflection))


class BelongsToBuilder(AssociationBuilder):
    macro = Macro.BELONGS_TO
    valid_options = AssociationBuilder.valid_options | {"foreign_key", "polymorphic"}

    @staticmethod
    def type_attribute(reflection: AssociationReflection) -> str:
        return f"{reflection.name}_type"

    @classmethod
    def can_fetch(cls, instance: "Resource", reflection: AssociationReflection) -> bool:
        if instance.read_attribute(reflection.foreign_key) is None:
            return False
        if reflection.polymorphic:
            return instance.read_attribute(cls.type_attribute(reflection)) is not None
        return True

    @classmethod
    def fetch(cls, instance: "Resource", reflection: AssociationReflection) -> typing.Any:
        if reflection.polymorphic:
            type_name = instance.read_attribute(cls.type_attribute(reflection))
            target = reflection.resolve(camelize(str(type_name)))
        else:
            target = reflection.klass
        return typing.cast(typing.Type["Resource"], target).find(
            instance.read_attribute(reflection.foreign_key)
        )


class Association:
    """
    The class-body form of an association declaration::

        class Post(Resource):
            comments = HasMany()
            author = BelongsTo(class_name="Person")

    Options are validated when the declaration is evaluated.
    """

    builder_class: typing.ClassVar[typing.Type[AssociationBuilder]]

    name: typing.Optional[str] = None
    options: typing.Mapping[str, typing.Any]

    def __set_name__(self, owner: typing.Type["Resource"], name: str) -> None:
        self.name = name
        self.builder_class(owner, name, self.options).build(install_accessor=False)

    def __get__(
        self, instance: typing.Optional["Resource"], owner: typing.Optional[type] = None
    ) -> typing.Any:
        if instance is None:
            return self
        reflection = type(instance).reflections[assert_not_none(self.name)]
        return self.builder_class.read(instance, reflection)

    def __set__(self, instance: "Resource", value: typing.Any) -> None:
        name = assert_not_none(self.name)
        instance._association_cache.pop(name, None)
        instance.attributes[name] = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(f'{k}={v!r}' for k, v in self.options.items())})"

    def __init__(self, **options: typing.Any):
        self.builder_class.validate_options(options)
        self.options = options


class HasMany(Association):
    builder_class = HasManyBuilder


class HasOne(Association):
    builder_class = HasOneBuilder


class BelongsTo(Association):
    builder_class = BelongsToBuilder


_descriptor_classes: typing.Mapping[Macro, typing.Type[Association]] = {
    Macro.HAS_MANY: HasMany,
    Macro.HAS_ONE: HasOne,
    Macro.BELONGS_TO: BelongsTo,
}

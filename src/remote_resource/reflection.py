import enum
import importlib
import logging
import sys
import typing
from types import MappingProxyType

from .deferred import Deferred
from .exceptions import AssociationTargetNotFoundError
from .inflection import camelize, classify
from .inflection import foreign_key as foreign_key_for
from .registry import lookup_resource_class

logger = logging.getLogger(__name__)


class Macro(str, enum.Enum):
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"


def _getattr_path(root: typing.Any, path: typing.Sequence[str]) -> typing.Optional[type]:
    current = root
    for part in path:
        current = getattr(current, part, None)
        if current is None:
            return None
    return current if isinstance(current, type) else None


def resolve_class(class_name: str, owner: typing.Optional[type] = None) -> typing.Optional[type]:
    """
    Finds the class named ``class_name``, which may be a dotted path.

    The name is looked up, in order, as a member of ``owner`` (nested
    classes), in the module that defines ``owner``, in the registry of
    resource classes, and finally as an importable ``module.Class`` path.
    Returns ``None`` when none of them has it.
    """
    path = class_name.split(".")
    if owner is not None:
        candidate = _getattr_path(owner, path)
        if candidate is not None:
            return candidate
        module = sys.modules.get(owner.__module__)
        if module is not None:
            candidate = _getattr_path(module, path)
            if candidate is not None:
                return candidate
    if len(path) == 1:
        return lookup_resource_class(class_name)
    head = lookup_resource_class(path[0])
    if head is not None:
        candidate = _getattr_path(head, path[1:])
        if candidate is not None:
            return candidate
    module_name = ".".join(path[:-1])
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    return _getattr_path(module, path[-1:])


class AssociationReflection:
    """
    The immutable description of one declared association.

    The target class is resolved lazily through a :py:class:`Deferred`, so a
    reflection may name a class that is defined after its owner.  A failed
    resolution raises :py:class:`AssociationTargetNotFoundError` at the time
    :py:attr:`klass` is accessed and is retried on the next access.
    """

    _macro: Macro
    _name: str
    _options: typing.Mapping[str, typing.Any]
    _owner: typing.Optional[type]
    _target: Deferred[type]

    @property
    def macro(self) -> Macro:
        return self._macro

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> typing.Mapping[str, typing.Any]:
        return self._options

    @property
    def owner(self) -> typing.Optional[type]:
        return self._owner

    @property
    def class_name(self) -> str:
        class_name = self._options.get("class_name")
        if class_name is None:
            return classify(self._name)
        if isinstance(class_name, type):
            return class_name.__name__
        class_name = str(class_name)
        if "." in class_name:
            return class_name
        return camelize(class_name)

    @property
    def foreign_key(self) -> str:
        return str(self._options.get("foreign_key") or foreign_key_for(self._name))

    @property
    def polymorphic(self) -> bool:
        return bool(self._options.get("polymorphic", False))

    @property
    def klass(self) -> type:
        return self._target()

    def resolve(self, class_name: str) -> type:
        target = resolve_class(class_name, self._owner)
        if target is None:
            raise AssociationTargetNotFoundError(self._name, class_name)
        logger.debug("association (%s) resolved %s to %r", self._name, class_name, target)
        return target

    def __repr__(self) -> str:
        owner = self._owner.__name__ if self._owner is not None else None
        return (
            f"<AssociationReflection {self._macro.value} {self._name} "
            f"owner={owner} class_name={self.class_name}>"
        )

    def __init__(
        self,
        macro: typing.Union[Macro, str],
        name: str,
        options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        owner: typing.Optional[type] = None,
    ):
        self._macro = Macro(macro)
        self._name = str(name)
        self._options = MappingProxyType(dict(options or {}))
        self._owner = owner
        class_name = self._options.get("class_name")
        if isinstance(class_name, type):
            self._target = Deferred.resolved_with(class_name)
        else:
            self._target = Deferred(lambda: self.resolve(self.class_name))

"""
remote_resource.implementations.sqlalchemy.declarative module lets a
SQLAlchemy model refer to a remote resource through a local foreign-key
column.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy.orm import declarative_base
   from remote_resource.implementations.sqlalchemy import belongs_to_resource

   Base = declarative_base()

   class Invoice(Base):
       __tablename__ = "invoices"

       id = sa.Column(sa.Integer(), primary_key=True)
       customer_id = sa.Column(sa.Integer())

       customer = belongs_to_resource(class_name="Customer")

   invoice = session.get(Invoice, 1)
   invoice.customer  # GET /customers/<customer_id>.json

"""
import logging
import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...exceptions import InvalidDeclarationError
from ...reflection import AssociationReflection, Macro
from ...utils import assert_not_none

if typing.TYPE_CHECKING:
    from ...base import Resource  # noqa: F401

logger = logging.getLogger(__name__)

_CACHE_ATTR = "_remote_resource_cache"


class ResourceReference:
    """
    A descriptor resolving a remote resource from the value of a mapped
    foreign-key column of the owning model.

    The target class is resolved lazily, at first access.  The fetched
    resource is cached on the model instance together with the foreign-key
    value it was fetched for, and is fetched again once the column value
    changes.
    """

    class_name: typing.Optional[str]
    foreign_key: typing.Optional[str]
    reflection: typing.Optional[AssociationReflection] = None

    def __set_name__(self, owner: type, name: str) -> None:
        options: typing.Dict[str, typing.Any] = {}
        if self.class_name is not None:
            options["class_name"] = self.class_name
        if self.foreign_key is not None:
            options["foreign_key"] = self.foreign_key
        self.reflection = AssociationReflection(Macro.BELONGS_TO, name, options, owner=owner)

    def _foreign_key_value(self, instance: typing.Any) -> typing.Any:
        reflection = assert_not_none(self.reflection)
        key = reflection.foreign_key
        mapper = orm.class_mapper(type(instance))
        if key not in mapper.column_attrs:
            raise InvalidDeclarationError(
                f"{type(instance).__name__} has no mapped column {key} "
                f"for resource reference ({reflection.name})"
            )
        return sa.inspect(instance).attrs[key].value

    def _cache(
        self, instance: typing.Any
    ) -> typing.Dict[str, typing.Tuple[typing.Any, typing.Any]]:
        cache = instance.__dict__.get(_CACHE_ATTR)
        if cache is None:
            cache = instance.__dict__[_CACHE_ATTR] = {}
        return cache

    def __get__(self, instance: typing.Any, owner: typing.Optional[type] = None) -> typing.Any:
        if instance is None:
            return self
        reflection = assert_not_none(self.reflection)
        key_value = self._foreign_key_value(instance)
        if key_value is None:
            return None
        cache = self._cache(instance)
        cached = cache.get(reflection.name)
        if cached is not None and cached[0] == key_value:
            return cached[1]
        target = typing.cast(typing.Type["Resource"], reflection.klass)
        logger.debug(
            "fetching %s(%r) for %s.%s",
            target.__name__,
            key_value,
            type(instance).__name__,
            reflection.name,
        )
        resource = target.find(key_value)
        cache[reflection.name] = (key_value, resource)
        return resource

    def __set__(self, instance: typing.Any, value: typing.Optional["Resource"]) -> None:
        reflection = assert_not_none(self.reflection)
        key_value = value.id if value is not None else None
        setattr(instance, reflection.foreign_key, key_value)
        cache = self._cache(instance)
        if value is None:
            cache.pop(reflection.name, None)
        else:
            cache[reflection.name] = (key_value, value)

    def __init__(
        self, class_name: typing.Optional[str] = None, foreign_key: typing.Optional[str] = None
    ):
        self.class_name = class_name
        self.foreign_key = foreign_key


def belongs_to_resource(
    class_name: typing.Optional[str] = None, foreign_key: typing.Optional[str] = None
) -> ResourceReference:
    return ResourceReference(class_name=class_name, foreign_key=foreign_key)

import collections.abc
import copy
import dataclasses
import logging
import re
import threading
import types
import typing
from types import MappingProxyType
from urllib.parse import quote, urlsplit

import httpx

from .associations import BelongsToBuilder, HasManyBuilder, HasOneBuilder
from .attributes import EMPTY_ACCESSOR_TABLE, AccessorTable, AttributeSet
from .casings import Casing
from .casings import lookup as lookup_casing
from .collection import ResourceCollection
from .config import get_settings
from .connection import Connection
from .exceptions import (
    AssociationTargetNotFoundError,
    CoercionError,
    InvalidDeclarationError,
    MissingPrefixParamError,
    ResourceGone,
    ResourceNotFound,
)
from .formats import Format, JSONFormat
from .formats import lookup as lookup_format
from .formats import remove_root as strip_root
from .formats.url_encoded_format import to_query
from .inflection import camelize, demodulize, pluralize, singularize, underscore
from .reflection import AssociationReflection, Macro, resolve_class
from .registry import register_resource_class
from .schema import AttributeType, SchemaLike, cast, normalize_schema
from .utils import is_structured

logger = logging.getLogger(__name__)

_schema_lock = threading.RLock()

_prefix_param_re = re.compile(r":(\w+)")
_id_from_location_re = re.compile(r"/([^/]*?)(\.\w+)?$")


@dataclasses.dataclass(frozen=True)
class ResourceOptions:
    site: typing.Optional[str] = None
    prefix: typing.Optional[str] = None
    element_name: typing.Optional[str] = None
    collection_name: typing.Optional[str] = None
    primary_key: str = "id"
    format: typing.Union[str, Format, None] = None
    collection_parser: typing.Optional[typing.Type[ResourceCollection]] = None
    include_format_in_path: typing.Optional[bool] = None
    include_root_in_json: bool = False
    partial_writes: bool = False
    headers: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    timeout: typing.Optional[float] = None
    casing: typing.Union[str, Casing] = "none"
    schema: SchemaLike = None
    transport: typing.Optional[httpx.BaseTransport] = None


def handle_meta(meta: typing.Optional[type], parent: ResourceOptions) -> ResourceOptions:
    """
    Merges the options declared on an inner ``Meta`` class over those of the
    parent resource.  The element name, the collection name and the schema
    declaration are never taken over from the parent.
    """
    options = dataclasses.replace(parent, element_name=None, collection_name=None, schema=None)
    if meta is None:
        return options
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    known = {f.name for f in dataclasses.fields(ResourceOptions)}
    for k in attrs:
        if k not in known:
            raise InvalidDeclarationError(f"unknown option ({k}) in Meta")
    return dataclasses.replace(options, **attrs)


class _ClassOrInstanceProperty:
    _for_class: typing.Callable[[typing.Any], typing.Any]
    _for_instance: typing.Callable[[typing.Any], typing.Any]

    def __get__(self, instance: typing.Any, owner: typing.Optional[type] = None) -> typing.Any:
        if instance is None:
            return self._for_class(owner)
        return self._for_instance(instance)

    def __init__(
        self,
        for_class: typing.Callable[[typing.Any], typing.Any],
        for_instance: typing.Callable[[typing.Any], typing.Any],
    ):
        self._for_class = for_class
        self._for_instance = for_instance


def _to_plain(value: typing.Any) -> typing.Any:
    if isinstance(value, Resource):
        return value.to_dict()
    if isinstance(value, collections.abc.Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if is_structured(value):
        return [_to_plain(v) for v in value]
    return value


class Resource:
    """
    The base class of remote resources.

    A resource class is configured through an inner ``Meta`` class::

        class Person(Resource):
            class Meta:
                site = "http://api.example.com"
                schema = Schema().string("name").integer("age")

            posts = HasMany()

    Attribute values live in the instance's :py:class:`AttributeSet`.  Names
    declared in the schema are reachable through typed accessors, which cast
    written values to the declared type; any other name present in the
    attribute set is reachable as a plain attribute as well.
    """

    _meta: typing.ClassVar[ResourceOptions] = ResourceOptions()
    _accessors: typing.ClassVar[AccessorTable] = EMPTY_ACCESSOR_TABLE
    _reflections: typing.ClassVar[typing.Mapping[str, AssociationReflection]] = MappingProxyType(
        {}
    )
    _generated: typing.ClassVar[typing.Dict[str, typing.Type["Resource"]]] = {}

    _attributes: AttributeSet
    _prefix_options: typing.Dict[str, typing.Any]
    _persisted: bool
    _association_cache: typing.Dict[str, typing.Any]
    _changed_attributes: typing.Dict[str, typing.Any]
    _previously_changed: typing.Dict[str, typing.Tuple[typing.Any, typing.Any]]

    def __init_subclass__(cls, register: bool = True, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)  # type: ignore
        parent = next(b for b in cls.__mro__[1:] if issubclass(b, Resource))
        cls._meta = handle_meta(cls.__dict__.get("Meta"), parent._meta)
        cls._generated = {}
        if cls._meta.schema is not None:
            cls.declare_schema(cls._meta.schema)
        else:
            with _schema_lock:
                cls._accessors = AccessorTable.build(
                    parent._accessors.entries, cls._is_static_member
                )
        if register:
            register_resource_class(cls)

    @classmethod
    def _is_static_member(cls, name: str) -> bool:
        return any(name in vars(klass) for klass in cls.__mro__)

    @classmethod
    def _is_data_descriptor(cls, name: str) -> bool:
        for klass in cls.__mro__:
            if name in vars(klass):
                return hasattr(type(vars(klass)[name]), "__set__")
        return False

    # schema

    @classmethod
    def declare_schema(cls, schema: SchemaLike) -> None:
        """
        Replaces the schema of this class.  Accessors are generated for the
        declared names that are not already defined on the class, and the
        accessors of names no longer declared are gone afterwards.  ``None``
        or an empty schema leaves the class with no generated accessors.

        :raises ValueError: for an unknown type name, in which case the
            current schema stays in effect.
        """
        entries = normalize_schema(schema)
        with _schema_lock:
            table = AccessorTable.build(entries, cls._is_static_member)
            cls._accessors = table
        logger.debug(
            "schema of %s rebuilt with %d entries and %d accessors",
            cls.__name__,
            len(entries),
            len(table),
        )

    @classmethod
    def clear_schema(cls) -> None:
        cls.declare_schema(None)

    @classmethod
    def get_schema(cls) -> typing.Optional[typing.Mapping[str, AttributeType]]:
        return cls._accessors.types if cls._accessors.declared else None

    @classmethod
    def accessors(cls) -> AccessorTable:
        return cls._accessors

    known_attributes = _ClassOrInstanceProperty(
        lambda cls: list(cls._accessors.types),
        lambda self: list(dict.fromkeys([*type(self)._accessors.types, *self._attributes])),
    )

    reflections = _ClassOrInstanceProperty(
        lambda cls: cls._reflections,
        lambda self: type(self)._reflections,
    )

    # associations

    @classmethod
    def create_reflection(
        cls,
        macro: typing.Union[Macro, str],
        name: str,
        options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> AssociationReflection:
        reflection = AssociationReflection(macro, name, options, owner=cls)
        reflections = dict(cls._reflections)
        reflections[reflection.name] = reflection
        cls._reflections = MappingProxyType(reflections)
        return reflection

    @classmethod
    def has_many(cls, name: str, **options: typing.Any) -> AssociationReflection:
        return HasManyBuilder(cls, name, options).build()

    @classmethod
    def has_one(cls, name: str, **options: typing.Any) -> AssociationReflection:
        return HasOneBuilder(cls, name, options).build()

    @classmethod
    def belongs_to(cls, name: str, **options: typing.Any) -> AssociationReflection:
        return BelongsToBuilder(cls, name, options).build()

    # naming and paths

    @classmethod
    def element_name(cls) -> str:
        return cls._meta.element_name or underscore(demodulize(cls.__name__))

    @classmethod
    def collection_name(cls) -> str:
        return cls._meta.collection_name or pluralize(cls.element_name())

    @classmethod
    def primary_key(cls) -> str:
        return cls._meta.primary_key

    @classmethod
    def prefix_source(cls) -> str:
        prefix = cls._meta.prefix
        if prefix is None:
            prefix = urlsplit(cls._meta.site).path if cls._meta.site else "/"
        if not prefix.startswith("/"):
            prefix = "/" + prefix
        if not prefix.endswith("/"):
            prefix += "/"
        return prefix

    @classmethod
    def prefix_parameters(cls) -> typing.FrozenSet[str]:
        return frozenset(_prefix_param_re.findall(cls.prefix_source()))

    @classmethod
    def prefix(cls, options: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> str:
        options = options or {}
        return _prefix_param_re.sub(
            lambda m: quote(str(options.get(m.group(1), "")), safe=""), cls.prefix_source()
        )

    @classmethod
    def check_prefix_options(
        cls, prefix_options: typing.Optional[typing.Mapping[str, typing.Any]]
    ) -> None:
        prefix_options = prefix_options or {}
        for param in sorted(cls.prefix_parameters()):
            value = prefix_options.get(param)
            if value is None or value == "":
                raise MissingPrefixParamError(param)

    @classmethod
    def split_options(
        cls, options: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> typing.Tuple[typing.Dict[str, typing.Any], typing.Dict[str, typing.Any]]:
        """
        Splits ``options`` into prefix parameters and query parameters.
        """
        params = cls.prefix_parameters()
        prefix_options: typing.Dict[str, typing.Any] = {}
        query_options: typing.Dict[str, typing.Any] = {}
        for k, v in (options or {}).items():
            (prefix_options if str(k) in params else query_options)[str(k)] = v
        return prefix_options, query_options

    @classmethod
    def format_extension(cls) -> str:
        include = cls._meta.include_format_in_path
        if include is None:
            include = get_settings().include_format_in_path
        extension = cls.get_format().extension
        return f".{extension}" if include and extension else ""

    @classmethod
    def query_string(cls, options: typing.Optional[typing.Mapping[str, typing.Any]]) -> str:
        return f"?{to_query(options)}" if options else ""

    @classmethod
    def element_path(
        cls,
        id: typing.Any,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        query_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> str:
        cls.check_prefix_options(prefix_options)
        if query_options is None:
            prefix_options, query_options = cls.split_options(prefix_options)
        return (
            f"{cls.prefix(prefix_options)}{cls.collection_name()}/{quote(str(id), safe='')}"
            f"{cls.format_extension()}{cls.query_string(query_options)}"
        )

    @classmethod
    def new_element_path(
        cls, prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> str:
        return f"{cls.prefix(prefix_options)}{cls.collection_name()}/new{cls.format_extension()}"

    @classmethod
    def collection_path(
        cls,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        query_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> str:
        cls.check_prefix_options(prefix_options)
        if query_options is None:
            prefix_options, query_options = cls.split_options(prefix_options)
        return (
            f"{cls.prefix(prefix_options)}{cls.collection_name()}"
            f"{cls.format_extension()}{cls.query_string(query_options)}"
        )

    @classmethod
    def singleton_path(
        cls,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        query_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> str:
        cls.check_prefix_options(prefix_options)
        if query_options is None:
            prefix_options, query_options = cls.split_options(prefix_options)
        return (
            f"{cls.prefix(prefix_options)}{cls.element_name()}"
            f"{cls.format_extension()}{cls.query_string(query_options)}"
        )

    @classmethod
    def custom_method_collection_path(
        cls, method_name: str, options: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> str:
        prefix_options, query_options = cls.split_options(options)
        cls.check_prefix_options(prefix_options)
        return (
            f"{cls.prefix(prefix_options)}{cls.collection_name()}/{method_name}"
            f"{cls.format_extension()}{cls.query_string(query_options)}"
        )

    # collaborators

    @classmethod
    def get_format(cls) -> Format:
        return lookup_format(cls._meta.format or get_settings().default_format)

    @classmethod
    def get_casing(cls) -> Casing:
        return lookup_casing(cls._meta.casing or "none")

    @classmethod
    def get_collection_parser(cls) -> typing.Type[ResourceCollection]:
        return cls._meta.collection_parser or ResourceCollection

    @classmethod
    def get_connection(cls) -> Connection:
        if not cls._meta.site:
            raise InvalidDeclarationError(f"no site is configured for {cls.__name__}")
        timeout = cls._meta.timeout
        if timeout is None:
            timeout = get_settings().timeout
        return Connection(
            cls._meta.site,
            cls.get_format(),
            timeout=timeout,
            headers=cls._meta.headers,
            transport=cls._meta.transport,
        )

    # querying

    @classmethod
    def instantiate_record(
        cls,
        record: typing.Optional[typing.Mapping[str, typing.Any]],
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> "Resource":
        resource = cls(record, persisted=True)
        if prefix_options:
            resource._prefix_options = dict(prefix_options)
        return resource

    @classmethod
    def find(
        cls, id: typing.Any, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> "Resource":
        prefix_options, query_options = cls.split_options(params)
        path = cls.element_path(id, prefix_options, query_options)
        response = cls.get_connection().get(path)
        return cls.instantiate_record(cls.get_format().decode(response.content), prefix_options)

    @classmethod
    def find_all(
        cls,
        params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        from_: typing.Optional[str] = None,
    ) -> ResourceCollection:
        """
        Returns a collection of the resources matching ``params``.  Nothing
        is requested until an element of the collection is needed.

        :param params: prefix parameters and query parameters, mixed.
        :param from_: a path to request instead of the collection path.
        """
        if from_ is not None:
            prefix_options, query_options = {}, dict(params or {})
        else:
            prefix_options, query_options = cls.split_options(params)
        collection = cls.get_collection_parser()()
        collection.resource_class = cls
        collection.prefix_options = prefix_options
        collection.query_params = query_options
        collection.original_params = dict(params or {})
        collection.from_ = from_
        return collection

    @classmethod
    def find_first(
        cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> typing.Optional["Resource"]:
        return cls.find_all(params).first()

    @classmethod
    def find_last(
        cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> typing.Optional["Resource"]:
        return cls.find_all(params).last()

    @classmethod
    def find_one(
        cls, from_: str, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> "Resource":
        response = cls.get_connection().get(f"{from_}{cls.query_string(params)}")
        return cls.instantiate_record(cls.get_format().decode(response.content))

    @classmethod
    def find_singleton(
        cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> typing.Optional["Resource"]:
        prefix_options, query_options = cls.split_options(params)
        path = cls.singleton_path(prefix_options, query_options)
        response = cls.get_connection().get(path)
        if response.status_code == 204 or not response.content.strip():
            return None
        return cls.instantiate_record(cls.get_format().decode(response.content), prefix_options)

    @classmethod
    def where(cls, **clauses: typing.Any) -> ResourceCollection:
        return cls.find_all(params=clauses)

    @classmethod
    def exists(
        cls, id: typing.Any, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> bool:
        if id is None:
            return False
        prefix_options, query_options = cls.split_options(params)
        path = cls.element_path(id, prefix_options, query_options)
        try:
            response = cls.get_connection().head(path)
        except (ResourceNotFound, ResourceGone):
            return False
        return response.status_code == 200

    # persistence

    @classmethod
    def create(
        cls, attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None, **kwargs
    ) -> "Resource":
        resource = cls(attributes, **kwargs)
        resource.save()
        return resource

    @classmethod
    def delete(
        cls, id: typing.Any, params: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> httpx.Response:
        return cls.get_connection().delete(cls.element_path(id, params))

    @property
    def attributes(self) -> AttributeSet:
        return self._attributes

    @attributes.setter
    def attributes(self, value: typing.Mapping[str, typing.Any]) -> None:
        self._attributes = AttributeSet(value)
        self._association_cache = {}
        self._changed_attributes = {}
        self._previously_changed = {}

    @property
    def prefix_options(self) -> typing.Dict[str, typing.Any]:
        return self._prefix_options

    @prefix_options.setter
    def prefix_options(self, value: typing.Mapping[str, typing.Any]) -> None:
        self._prefix_options = dict(value)

    @property
    def id(self) -> typing.Any:
        return self.read_attribute(type(self).primary_key())

    @id.setter
    def id(self, value: typing.Any) -> None:
        self.write_attribute(type(self).primary_key(), value)

    @property
    def persisted(self) -> bool:
        return self._persisted

    @property
    def is_new(self) -> bool:
        return not self._persisted

    # changes

    @property
    def changed_attributes(self) -> typing.Dict[str, typing.Any]:
        """
        Maps the name of every attribute written since the last load or
        save to the value it had before.
        """
        return dict(self._changed_attributes)

    @property
    def changes(self) -> typing.Dict[str, typing.Tuple[typing.Any, typing.Any]]:
        return {k: (v, self._attributes.get(k)) for k, v in self._changed_attributes.items()}

    @property
    def changed(self) -> typing.List[str]:
        return list(self._changed_attributes)

    @property
    def is_changed(self) -> bool:
        return len(self._changed_attributes) > 0

    @property
    def previously_changed(self) -> typing.Dict[str, typing.Tuple[typing.Any, typing.Any]]:
        """The :py:attr:`changes` that the last successful save sent."""
        return dict(self._previously_changed)

    def attribute_changed(self, name: str) -> bool:
        return self._attribute_name(name) in self._changed_attributes

    def _track_change(self, name: str, value: typing.Any) -> None:
        if name in self._changed_attributes:
            # back to the value it had before
            if self._changed_attributes[name] == value:
                del self._changed_attributes[name]
        elif self._attributes.get(name) != value:
            self._changed_attributes[name] = self._attributes.get(name)

    def _element_path(self) -> str:
        return type(self).element_path(self.id, self._prefix_options)

    def _collection_path(self) -> str:
        return type(self).collection_path(self._prefix_options)

    def _id_from_response(self, response: httpx.Response) -> typing.Optional[str]:
        location = response.headers.get("Location")
        if not location:
            return None
        m = _id_from_location_re.search(location)
        return m.group(1) if m is not None else None

    def _load_attributes_from_response(self, response: httpx.Response) -> None:
        status = response.status_code
        if 100 <= status < 200 or status in (204, 304):
            return
        if response.headers.get("Content-Length") == "0" or not response.content.strip():
            return
        self.load(
            self.get_format().decode(response.content),
            remove_root=True,
            persisted=True,
            merge=True,
        )

    def _create(self) -> httpx.Response:
        response = self.get_connection().post(self._collection_path(), self.encode())
        new_id = self._id_from_response(response)
        if new_id is not None:
            self.id = new_id
        self._load_attributes_from_response(response)
        self._persisted = True
        return response

    def _update(self) -> httpx.Response:
        response = self.get_connection().put(self._element_path(), self.encode())
        self._load_attributes_from_response(response)
        return response

    def save(self) -> bool:
        """
        Creates the resource with ``POST`` when it is new, or updates it with
        ``PUT`` otherwise.  A response body, when there is one, is loaded back
        into the instance.

        Once saved, the pending changes move to :py:attr:`previously_changed`.
        """
        changes = self.changes
        if self.is_new:
            self._create()
        else:
            self._update()
        self._previously_changed = changes
        self._changed_attributes = {}
        return True

    def destroy(self) -> httpx.Response:
        return self.get_connection().delete(self._element_path())

    def reload(self) -> "Resource":
        """
        Fetches the resource again and replaces the whole attribute set with
        the fetched one.  Memoized associations are forgotten.
        """
        fetched = type(self).find(self.id, params=self._prefix_options)
        self.load(fetched.attributes.to_dict(), persisted=True)
        return self

    def update_attribute(self, name: str, value: typing.Any) -> bool:
        self.write_attribute(name, value)
        return self.save()

    def update_attributes(self, attributes: typing.Mapping[str, typing.Any]) -> bool:
        self.load(attributes, merge=True)
        return self.save()

    # attributes

    def _attribute_name(self, name: str) -> str:
        name = str(name)
        return type(self).primary_key() if name == "id" else name

    def read_attribute(self, name: str) -> typing.Any:
        return self._attributes.get(self._attribute_name(name))

    def write_attribute(self, name: str, value: typing.Any) -> None:
        """
        Stores ``value`` under ``name``, cast to the declared type when the
        name is in the schema.  ``id`` stands for the primary key.

        :raises CoercionError: when the value cannot be cast, in which case
            the stored value is left as it was.
        """
        name = self._attribute_name(name)
        type_ = type(self)._accessors.types.get(name)
        if type_ is not None:
            try:
                value = cast(type_, value)
            except (ValueError, TypeError, ArithmeticError) as e:
                raise CoercionError(name, value, type_.value) from e
        self._track_change(name, value)
        self._attributes[name] = value
        self._association_cache.pop(name, None)

    def has_truthy_attribute(self, name: str) -> bool:
        return bool(self.read_attribute(name))

    def _association_target(self, name: str) -> typing.Optional[typing.Type["Resource"]]:
        """
        Returns the target class of the association ``name``, or ``None``
        when there is no such association or its target cannot be resolved
        yet.  An unresolvable target is reported by the accessor only.
        """
        reflection = type(self)._reflections.get(name)
        if reflection is None or reflection.polymorphic:
            return None
        try:
            return typing.cast(typing.Type[Resource], reflection.klass)
        except AssociationTargetNotFoundError as e:
            logger.debug(
                "hydrating (%s) of %s without its target: %s", name, type(self).__name__, e
            )
            return None

    def _find_or_create_resource_for(self, name: str) -> typing.Type["Resource"]:
        cls = type(self)
        target = self._association_target(name)
        if target is not None:
            return target
        class_name = camelize(name)
        found = resolve_class(class_name, cls)
        if found is not None and issubclass(found, Resource):
            return found
        return cls._create_resource_for(class_name)

    def _find_or_create_resource_for_collection(self, name: str) -> typing.Type["Resource"]:
        target = self._association_target(name)
        if target is not None:
            return target
        return self._find_or_create_resource_for(singularize(name))

    @classmethod
    def _create_resource_for(cls, class_name: str) -> typing.Type["Resource"]:
        generated = cls._generated.get(class_name)
        if generated is None:
            meta = type(
                "Meta",
                (),
                {
                    "site": cls._meta.site,
                    "prefix": cls._meta.prefix,
                    "format": cls._meta.format,
                    "headers": cls._meta.headers,
                    "timeout": cls._meta.timeout,
                    "transport": cls._meta.transport,
                    "casing": cls._meta.casing,
                },
            )
            namespace = {
                "Meta": meta,
                "__module__": cls.__module__,
                "__qualname__": f"{cls.__qualname__}.{class_name}",
            }
            generated = typing.cast(
                typing.Type[Resource],
                types.new_class(
                    class_name, (Resource,), {"register": False}, lambda ns: ns.update(namespace)
                ),
            )
            cls._generated[class_name] = generated
            logger.debug("generated resource class %s for %s", class_name, cls.__name__)
        return generated

    def _hydrate(self, key: str, value: typing.Any, persisted: bool) -> typing.Any:
        if isinstance(value, collections.abc.Mapping):
            return self._find_or_create_resource_for(key)(value, persisted=persisted)
        if is_structured(value):
            resource_class: typing.Optional[typing.Type[Resource]] = None
            items = []
            for item in value:
                if isinstance(item, collections.abc.Mapping):
                    if resource_class is None:
                        resource_class = self._find_or_create_resource_for_collection(key)
                    items.append(resource_class(item, persisted=persisted))
                else:
                    items.append(item)
            return items
        return value

    def load(
        self,
        attributes: typing.Optional[typing.Mapping[str, typing.Any]],
        remove_root: bool = False,
        persisted: typing.Optional[bool] = None,
        merge: bool = False,
    ) -> "Resource":
        """
        Hydrates the instance from a decoded payload.

        Nested mappings become resource instances and sequences of mappings
        become lists of them; other values are stored as they are, without
        being cast.  Prefix parameters found in the payload move to
        :py:attr:`prefix_options`.

        :param remove_root: strips a single enclosing key.  A single key that
            equals the element name is stripped regardless.
        :param persisted: updates the persisted state when not ``None``.
        :param merge: merges into the current attribute set instead of
            replacing it wholesale.  Replacing forgets every memoized
            association; merging forgets only those of the merged names.
        """
        if attributes is None:
            attributes = {}
        if not isinstance(attributes, collections.abc.Mapping):
            raise TypeError(f"expected an attributes mapping, got {attributes!r}")
        cls = type(self)
        attributes = cls.get_casing().decode(attributes)
        if len(attributes) == 1:
            key = next(iter(attributes))
            if remove_root or key == cls.element_name():
                attributes = strip_root(attributes)
        prefix_options, attributes = cls.split_options(attributes)
        if prefix_options:
            self._prefix_options = {**self._prefix_options, **prefix_options}

        nested_persisted = bool(persisted) if persisted is not None else self._persisted
        hydrated = {
            str(k): self._hydrate(str(k), v, nested_persisted) for k, v in attributes.items()
        }
        if merge:
            for k, v in hydrated.items():
                if persisted is None:
                    self._track_change(k, v)
                self._attributes[k] = v
                self._association_cache.pop(k, None)
        else:
            self._attributes = AttributeSet(hydrated)
            self._association_cache = {}
            self._changed_attributes = {}
            self._previously_changed = {}
        if persisted is not None:
            self._persisted = persisted
        return self

    # serialization

    def to_dict(
        self, only: typing.Optional[typing.Iterable[str]] = None
    ) -> typing.Dict[str, typing.Any]:
        names = None if only is None else frozenset(only)
        return self.get_casing().encode(
            {k: _to_plain(v) for k, v in self._attributes.items() if names is None or k in names}
        )

    def encode(self, only_changed: typing.Optional[bool] = None, **options: typing.Any) -> str:
        """
        Encodes the resource in its format.

        :param only_changed: encodes the changed attributes only.  Defaults to
            the ``partial_writes`` option for persisted resources.
        """
        if only_changed is None:
            only_changed = self._persisted and self._meta.partial_writes
        format = self.get_format()
        root: typing.Optional[str] = None
        if self._meta.include_root_in_json or not isinstance(format, JSONFormat):
            root = self.element_name()
        payload = self.to_dict(only=self._changed_attributes if only_changed else None)
        return format.encode(payload, root=root, **options)

    def clone(self) -> "Resource":
        """
        Returns a new, unsaved copy of the resource without its primary key
        and without nested resources.
        """
        primary_key = type(self).primary_key()
        cloned = {
            k: copy.deepcopy(v)
            for k, v in self._attributes.items()
            if k != primary_key and not isinstance(v, Resource)
        }
        resource = type(self)()
        resource._prefix_options = dict(self._prefix_options)
        resource._attributes = AttributeSet(cloned)
        return resource

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        cls = type(self)
        accessor = cls._accessors.get(name)
        if accessor is not None:
            return accessor.reader(self)
        try:
            attributes = object.__getattribute__(self, "_attributes")
        except AttributeError:
            raise AttributeError(name) from None
        if name in attributes:
            return attributes[name]
        if name in cls._accessors.types:
            return None
        raise AttributeError(f"{cls.__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: typing.Any) -> None:
        cls = type(self)
        if name.startswith("_") or cls._is_data_descriptor(name):
            object.__setattr__(self, name, value)
            return
        accessor = cls._accessors.get(name)
        if accessor is not None:
            accessor.writer(self, value)
        else:
            self.write_attribute(name, value)

    def __dir__(self) -> typing.Iterable[str]:
        return sorted(set(super().__dir__()) | set(self.known_attributes))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        return (
            type(other) is type(self)
            and typing.cast(Resource, other).id == self.id
            and typing.cast(Resource, other).prefix_options == self.prefix_options
        )

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._attributes.to_dict()!r}>"

    def __init__(
        self,
        attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        persisted: bool = False,
        **kwargs: typing.Any,
    ):
        object.__setattr__(self, "_attributes", AttributeSet())
        object.__setattr__(self, "_prefix_options", {})
        object.__setattr__(self, "_persisted", persisted)
        object.__setattr__(self, "_association_cache", {})
        object.__setattr__(self, "_changed_attributes", {})
        object.__setattr__(self, "_previously_changed", {})
        merged = dict(attributes or {})
        merged.update(kwargs)
        self.load(merged, persisted=persisted)

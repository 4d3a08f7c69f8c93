import collections.abc
import logging
import typing

if typing.TYPE_CHECKING:
    from .base import Resource  # noqa: F401

logger = logging.getLogger(__name__)


class ResourceCollection(collections.abc.Sequence):
    """
    An ordered, lazily requested list of resources.

    A collection returned by :py:meth:`Resource.find_all` holds no elements
    until one of them is needed; the first access requests the collection
    path, decodes the payload and hydrates every element in the order the
    server sent them.

    Subclasses override :py:meth:`parse_response` to read envelopes that
    carry extra fields next to the elements, e.g.::

        class PaginatedCollection(ResourceCollection):
            next_page = None

            def parse_response(self, parsed):
                self.next_page = parsed["next_page"]
                self.elements = parsed["results"]

    A subclass that overrides :py:meth:`parse_response` receives the payload
    with its root left in place.
    """

    resource_class: typing.Optional[typing.Type["Resource"]] = None
    query_params: typing.Dict[str, typing.Any]
    prefix_options: typing.Dict[str, typing.Any]
    original_params: typing.Dict[str, typing.Any]
    from_: typing.Optional[str]
    elements: typing.List[typing.Any]
    _requested: bool

    @classmethod
    def wants_envelope(cls) -> bool:
        return cls.parse_response is not ResourceCollection.parse_response

    def parse_response(self, parsed: typing.Any) -> None:
        if parsed is None:
            self.elements = []
        elif isinstance(parsed, collections.abc.Mapping):
            raise TypeError(
                f"expected a list of elements, got a mapping with keys {list(parsed)}; "
                "a collection_parser is needed to read this envelope"
            )
        else:
            self.elements = list(parsed)

    @property
    def requested(self) -> bool:
        return self._requested

    def _request_resources(self) -> typing.List[typing.Any]:
        if self._requested:
            return self.elements
        resource_class = self.resource_class
        if resource_class is None:
            raise TypeError("cannot request a collection that is not bound to a resource class")
        if self.from_ is not None:
            path = f"{self.from_}{resource_class.query_string(self.query_params)}"
        else:
            path = resource_class.collection_path(self.prefix_options, self.query_params)
        response = resource_class.get_connection().get(path)
        parsed = resource_class.get_format().decode(
            response.content, remove_root=not self.wants_envelope()
        )
        self.parse_response(parsed)
        self.elements = [
            resource_class.instantiate_record(e, self.prefix_options)
            if isinstance(e, collections.abc.Mapping)
            else e
            for e in self.elements
        ]
        self._requested = True
        logger.debug("requested %d %s", len(self.elements), resource_class.collection_name())
        return self.elements

    def call(self) -> "ResourceCollection":
        self._request_resources()
        return self

    def refresh(self) -> "ResourceCollection":
        self._requested = False
        return self.call()

    def to_list(self) -> typing.List[typing.Any]:
        return list(self._request_resources())

    def first(self) -> typing.Any:
        elements = self._request_resources()
        return elements[0] if elements else None

    def last(self) -> typing.Any:
        elements = self._request_resources()
        return elements[-1] if elements else None

    def where(self, **clauses: typing.Any) -> "ResourceCollection":
        assert self.resource_class is not None
        return self.resource_class.find_all(
            params={**self.prefix_options, **self.query_params, **clauses}, from_=self.from_
        )

    def first_or_initialize(self, **attributes: typing.Any) -> "Resource":
        assert self.resource_class is not None
        return self.first() or self.resource_class({**self.query_params, **attributes})

    def first_or_create(self, **attributes: typing.Any) -> "Resource":
        assert self.resource_class is not None
        return self.first() or self.resource_class.create({**self.query_params, **attributes})

    @typing.overload
    def __getitem__(self, index: int) -> typing.Any:
        ...  # pragma: nocover

    @typing.overload
    def __getitem__(self, index: slice) -> typing.List[typing.Any]:
        ...  # pragma: nocover

    def __getitem__(self, index):
        return self._request_resources()[index]

    def __len__(self) -> int:
        return len(self._request_resources())

    def __iter__(self) -> typing.Iterator[typing.Any]:
        return iter(self._request_resources())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceCollection):
            return self.to_list() == other.to_list()
        if isinstance(other, list):
            return self.to_list() == other
        return NotImplemented

    def __repr__(self) -> str:
        name = self.resource_class.__name__ if self.resource_class is not None else None
        if not self._requested:
            return f"<{type(self).__name__} of {name} (not requested)>"
        return f"<{type(self).__name__} of {name} {self.elements!r}>"

    def __init__(self, elements: typing.Any = None, from_: typing.Optional[str] = None):
        self.query_params = {}
        self.prefix_options = {}
        self.original_params = {}
        self.from_ = from_
        self.elements = []
        self._requested = elements is not None
        if elements is not None:
            self.parse_response(elements)

import logging
import typing

logger = logging.getLogger(__name__)

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object encapsulates a lazily evaluated value.
    It takes a function that yields the value for its constructor argument, and
    it behaves as a callable by which it resolves to the yielded value.

    The yielder is invoked on each call until it returns without raising;
    from then on the yielded value is memoized.  A failing yielder therefore
    keeps the deferred object unresolved, and the failure is reported anew
    on every call until whatever it waits for becomes available.

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    :param kwargs: keyword arguments for the yielder.
    """

    _yielder: typing.Optional[typing.Callable[..., T]] = None
    _value_yielded: bool = False
    _value: typing.Optional[T] = None
    _args: typing.Sequence[typing.Any]
    _kwargs: typing.Mapping[str, typing.Any]

    @classmethod
    def resolved_with(cls, value: T) -> "Deferred[T]":
        """
        Returns a :py:class:`Deferred` that is already resolved to ``value``.
        """
        deferred: Deferred[T] = cls(lambda: value)
        deferred._value = value
        deferred._value_yielded = True
        return deferred

    @property
    def resolved(self) -> bool:
        return self._value_yielded

    def __call__(self) -> T:
        if not self._value_yielded:
            assert self._yielder is not None
            value = self._yielder(*self._args, **self._kwargs)
            logger.debug("deferred value resolved to %r", value)
            self._value = value
            self._value_yielded = True
        return typing.cast(T, self._value)

    def __repr__(self) -> str:
        if self._value_yielded:
            return f"<Deferred resolved={self._value!r}>"
        return f"<Deferred yielder={self._yielder!r}>"

    def __init__(self, yielder: typing.Callable[..., T], *args, **kwargs) -> None:
        """
        Constructor.

        :param Callable[..., T] yielder: a callable that resolves the value.
        :param args: positional arguments for the yielder.
        :param kwargs: keyword arguments for the yielder.
        """
        self._yielder = yielder
        self._args = args
        self._kwargs = kwargs

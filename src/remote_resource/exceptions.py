import abc
import typing

if typing.TYPE_CHECKING:
    import httpx  # noqa: F401


class RemoteResourceException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self) -> str:
        return self.message


class InvalidDeclarationError(RemoteResourceException):
    _message: str

    @property
    def message(self) -> str:
        return self._message

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message


class UnknownFormatError(RemoteResourceException):
    """
    Raised when a format name does not resolve to a registered codec.
    ``identifier`` is the codec identifier derived from ``name`` that was
    looked up and found missing.
    """

    name: str
    identifier: str

    @property
    def message(self) -> str:
        return f'no format is registered as "{self.identifier}" (looked up by "{self.name}")'

    def __init__(self, name: str, identifier: str):
        super().__init__(name, identifier)
        self.name = name
        self.identifier = identifier


class UnknownCasingError(RemoteResourceException):
    name: str
    identifier: str

    @property
    def message(self) -> str:
        return f'no casing is registered as "{self.identifier}" (looked up by "{self.name}")'

    def __init__(self, name: str, identifier: str):
        super().__init__(name, identifier)
        self.name = name
        self.identifier = identifier


class CoercionError(RemoteResourceException):
    """
    Raised when a value written to a typed attribute cannot be cast to the
    declared type.  The underlying parse error is chained as ``__cause__``.
    """

    name: str
    value: typing.Any
    type: str

    @property
    def message(self) -> str:
        cause = f" ({self.__cause__!s})" if self.__cause__ is not None else ""
        return f"cannot cast {self.value!r} to {self.type} for attribute ({self.name}){cause}"

    def __init__(self, name: str, value: typing.Any, type: str):
        super().__init__(name, value, type)
        self.name = name
        self.value = value
        self.type = type


class InvalidOptionError(RemoteResourceException):
    option: str
    macro: str

    @property
    def message(self) -> str:
        return f"unknown option ({self.option}) for {self.macro}"

    def __init__(self, option: str, macro: str):
        super().__init__(option, macro)
        self.option = option
        self.macro = macro


class AssociationTargetNotFoundError(RemoteResourceException):
    association: str
    class_name: str

    @property
    def message(self) -> str:
        return (
            f'target class "{self.class_name}" of association ({self.association}) '
            "cannot be found"
        )

    def __init__(self, association: str, class_name: str):
        super().__init__(association, class_name)
        self.association = association
        self.class_name = class_name


class MissingPrefixParamError(RemoteResourceException):
    param: str

    @property
    def message(self) -> str:
        return f"{self.param} prefix_option is missing"

    def __init__(self, param: str):
        super().__init__(param)
        self.param = param


class TransportError(RemoteResourceException):
    """
    The base class for failures reported by :py:class:`remote_resource.connection.Connection`.
    """

    response: typing.Optional["httpx.Response"]
    _message: typing.Optional[str]

    @property
    def message(self) -> str:
        if self._message is not None:
            return self._message
        buf = ["Failed."]
        if self.response is not None:
            request = self.response.request
            buf.append(f"  Request = {request.method} {request.url}.")
            buf.append(f"  Response code = {self.response.status_code}.")
            buf.append(f"  Response message = {self.response.reason_phrase}.")
        return "".join(buf)

    def __init__(
        self,
        response: typing.Optional["httpx.Response"] = None,
        message: typing.Optional[str] = None,
    ):
        super().__init__(response, message)
        self.response = response
        self._message = message


class ConnectionTimeoutError(TransportError):
    pass


class ConnectionRefused(TransportError):
    pass


class Redirection(TransportError):
    @property
    def message(self) -> str:
        location = self.response.headers.get("Location") if self.response is not None else None
        if location:
            return f"{super().message} => {location}"
        return super().message


class ClientError(TransportError):
    pass


class BadRequest(ClientError):
    pass


class UnauthorizedAccess(ClientError):
    pass


class ForbiddenAccess(ClientError):
    pass


class ResourceNotFound(ClientError):
    pass


class MethodNotAllowed(ClientError):
    @property
    def allowed_methods(self) -> typing.Sequence[str]:
        assert self.response is not None
        return [
            verb.strip().lower() for verb in self.response.headers.get("Allow", "").split(",")
        ]


class ResourceConflict(ClientError):
    pass


class ResourceGone(ClientError):
    pass


class ResourceInvalid(ClientError):
    pass


class ServerError(TransportError):
    pass


class InvalidRequestError(RemoteResourceException):
    """
    Raised by :py:class:`remote_resource.http_mock.HttpMock` for a request
    that has no registered response.
    """

    method: str
    path: str
    registered: typing.Sequence[typing.Tuple[str, str]]

    @property
    def message(self) -> str:
        buf = [f"no response recorded for {self.method} {self.path}"]
        if self.registered:
            buf.append("; registered: ")
            buf.append(", ".join(f"{m} {p}" for m, p in self.registered))
        return "".join(buf)

    def __init__(self, method: str, path: str, registered: typing.Sequence[typing.Tuple[str, str]]):
        super().__init__(method, path, registered)
        self.method = method
        self.path = path
        self.registered = registered

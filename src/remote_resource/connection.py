import logging
import time
import typing

import httpx

from .exceptions import (
    BadRequest,
    ClientError,
    ConnectionRefused,
    ConnectionTimeoutError,
    ForbiddenAccess,
    MethodNotAllowed,
    Redirection,
    ResourceConflict,
    ResourceGone,
    ResourceInvalid,
    ResourceNotFound,
    ServerError,
    TransportError,
    UnauthorizedAccess,
)
from .formats import Format

logger = logging.getLogger(__name__)

_errors_by_status: typing.Mapping[int, typing.Type[TransportError]] = {
    301: Redirection,
    302: Redirection,
    303: Redirection,
    307: Redirection,
    308: Redirection,
    400: BadRequest,
    401: UnauthorizedAccess,
    403: ForbiddenAccess,
    404: ResourceNotFound,
    405: MethodNotAllowed,
    409: ResourceConflict,
    410: ResourceGone,
    422: ResourceInvalid,
}


def handle_response(response: httpx.Response) -> httpx.Response:
    """
    Returns ``response`` when its status is a success, otherwise raises the
    :py:class:`TransportError` subclass that corresponds to the status.
    """
    status = response.status_code
    error_class = _errors_by_status.get(status)
    if error_class is not None:
        raise error_class(response)
    if 200 <= status < 400:
        return response
    if 400 <= status < 500:
        raise ClientError(response)
    if 500 <= status < 600:
        raise ServerError(response)
    raise TransportError(response, f"Unknown response code: {status}")


class Connection:
    """
    Issues the HTTP requests of a resource class against its site.

    A fresh :py:class:`httpx.Client` is opened for every request.  Requests
    are sent through ``transport`` when one is given, else through
    :py:attr:`default_transport`, else through httpx's own transport.
    """

    default_transport: typing.ClassVar[typing.Optional[httpx.BaseTransport]] = None

    site: httpx.URL
    format: Format
    timeout: typing.Optional[float]
    headers: typing.Dict[str, str]
    transport: typing.Optional[httpx.BaseTransport]

    def url_for(self, path: str) -> httpx.URL:
        return self.site.join(path)

    def build_request_headers(
        self, method: str, headers: typing.Optional[typing.Mapping[str, str]] = None
    ) -> typing.Dict[str, str]:
        result = dict(self.headers)
        if headers:
            result.update(headers)
        keys = {k.lower() for k in result}
        if method in ("POST", "PUT", "PATCH"):
            if "content-type" not in keys:
                result["Content-Type"] = self.format.mime_type
        elif "accept" not in keys:
            result["Accept"] = self.format.mime_type
        return result

    def request(
        self,
        method: str,
        path: str,
        body: typing.Union[str, bytes, None] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> httpx.Response:
        method = method.upper()
        url = self.url_for(path)
        logger.info("%s %s", method, url)
        client_kwargs: typing.Dict[str, typing.Any] = {}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        transport = self.transport or Connection.default_transport
        if transport is not None:
            client_kwargs["transport"] = transport
        started = time.perf_counter()
        try:
            with httpx.Client(**client_kwargs) as client:
                response = client.request(
                    method,
                    url,
                    content=body,
                    headers=self.build_request_headers(method, headers),
                )
        except httpx.TimeoutException as e:
            raise ConnectionTimeoutError(message=f"{method} {url} timed out: {e}") from e
        except httpx.ConnectError as e:
            raise ConnectionRefused(message=f"{method} {url} refused: {e}") from e
        logger.info(
            "--> %d %s (%.1fms)",
            response.status_code,
            response.reason_phrase,
            (time.perf_counter() - started) * 1000,
        )
        return handle_response(response)

    def get(
        self, path: str, headers: typing.Optional[typing.Mapping[str, str]] = None
    ) -> httpx.Response:
        return self.request("GET", path, headers=headers)

    def head(
        self, path: str, headers: typing.Optional[typing.Mapping[str, str]] = None
    ) -> httpx.Response:
        return self.request("HEAD", path, headers=headers)

    def delete(
        self, path: str, headers: typing.Optional[typing.Mapping[str, str]] = None
    ) -> httpx.Response:
        return self.request("DELETE", path, headers=headers)

    def post(
        self,
        path: str,
        body: typing.Union[str, bytes] = "",
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> httpx.Response:
        return self.request("POST", path, body, headers)

    def put(
        self,
        path: str,
        body: typing.Union[str, bytes] = "",
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> httpx.Response:
        return self.request("PUT", path, body, headers)

    def patch(
        self,
        path: str,
        body: typing.Union[str, bytes] = "",
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> httpx.Response:
        return self.request("PATCH", path, body, headers)

    def __repr__(self) -> str:
        return f"<Connection site={str(self.site)!r} format={self.format!r}>"

    def __init__(
        self,
        site: typing.Union[str, httpx.URL],
        format: Format,
        timeout: typing.Optional[float] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
        transport: typing.Optional[httpx.BaseTransport] = None,
    ):
        self.site = httpx.URL(str(site))
        self.format = format
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.transport = transport

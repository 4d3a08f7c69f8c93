"""
An in-process stand-in for the remote service, for tests::

    with HttpMock() as mock:
        mock.get("/people/1.json", body='{"person": {"id": 1, "name": "Matz"}}')
        person = Person.find(1)

    assert mock.requests[0].method == "GET"

Responses are keyed on the request method and the request path including
its query string.  A request that matches nothing raises
:py:class:`InvalidRequestError`.
"""

import dataclasses
import logging
import typing

import httpx

from .connection import Connection
from .exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class MockResponse:
    body: typing.Union[str, bytes, None] = ""
    status: int = 200
    headers: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)

    def to_httpx(self, request: httpx.Request) -> httpx.Response:
        content = self.body.encode("utf-8") if isinstance(self.body, str) else self.body
        return httpx.Response(
            self.status, headers=dict(self.headers), content=content or b"", request=request
        )


def _path_of(url: httpx.URL) -> str:
    return url.raw_path.decode("ascii")


class HttpMock:
    requests: typing.List[httpx.Request]
    _responses: typing.Dict[typing.Tuple[str, str], typing.List[MockResponse]]
    _previous_transport: typing.Optional[httpx.BaseTransport]

    def respond_to(
        self,
        method: str,
        path: str,
        body: typing.Union[str, bytes, None] = "",
        status: int = 200,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> "HttpMock":
        """
        Registers a response.  Several responses registered for the same
        request are returned in turn, and the last one keeps being returned.
        """
        key = (method.upper(), path)
        self._responses.setdefault(key, []).append(MockResponse(body, status, dict(headers or {})))
        return self

    def get(self, path: str, body: typing.Union[str, bytes, None] = "", **kwargs) -> "HttpMock":
        return self.respond_to("GET", path, body, **kwargs)

    def head(self, path: str, **kwargs) -> "HttpMock":
        return self.respond_to("HEAD", path, None, **kwargs)

    def post(self, path: str, body: typing.Union[str, bytes, None] = "", **kwargs) -> "HttpMock":
        return self.respond_to("POST", path, body, **kwargs)

    def put(self, path: str, body: typing.Union[str, bytes, None] = "", **kwargs) -> "HttpMock":
        return self.respond_to("PUT", path, body, **kwargs)

    def patch(self, path: str, body: typing.Union[str, bytes, None] = "", **kwargs) -> "HttpMock":
        return self.respond_to("PATCH", path, body, **kwargs)

    def delete(self, path: str, body: typing.Union[str, bytes, None] = "", **kwargs) -> "HttpMock":
        return self.respond_to("DELETE", path, body, **kwargs)

    def requests_for(self, method: str, path: str) -> typing.List[httpx.Request]:
        return [
            r for r in self.requests if r.method == method.upper() and _path_of(r.url) == path
        ]

    def reset(self) -> None:
        self.requests = []
        self._responses = {}

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, _path_of(request.url))
        responses = self._responses.get(key)
        if not responses:
            raise InvalidRequestError(request.method, key[1], list(self._responses))
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        logger.debug("mocked %s %s with %d", request.method, key[1], response.status)
        return response.to_httpx(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def __enter__(self) -> "HttpMock":
        self._previous_transport = Connection.default_transport
        Connection.default_transport = self.transport
        return self

    def __exit__(self, *exc_info) -> None:
        Connection.default_transport = self._previous_transport
        self._previous_transport = None

    def __init__(self) -> None:
        self.requests = []
        self._responses = {}
        self._previous_transport = None

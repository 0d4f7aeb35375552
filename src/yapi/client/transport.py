"""HTTP transport: request construction, execution, status checks and decoding.

:class:`Transport` wraps an :class:`httpx.Client` and turns a
``(method, path, body)`` triple into an :class:`httpx.Request` against the
configured base URL, sends it, rejects non-2xx answers, and decodes the JSON
body into a typed value.

Error behaviour:

- Network failures, timeouts and redirect loops propagate as the original
  :class:`httpx.RequestError` (``httpx.TooManyRedirects`` for loops).
- A status outside ``[200, 300)`` raises
  :class:`~yapi.exceptions.HTTPStatusError` (or a status-specific subclass)
  carrying the status code and raw body.
- An undecodable 2xx body raises :class:`~yapi.exceptions.DecodeError`.

Nothing is retried.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from yapi.client.response import ApiResult, decode_body
from yapi.exceptions import (
    AuthError,
    ConfigError,
    HTTPStatusError,
    NotFoundError,
    ServerError,
)
from yapi.models import RequestConfig
from yapi.output import get_output

QueryParams = Union[BaseModel, Mapping[str, Any]]

_REDACTED_PARAMS = ("token",)


def encode_query(params: Optional[QueryParams]) -> list[tuple[str, str]]:
    """Encode a parameter record as ordered query-string pairs.

    Pydantic models are dumped by alias, so keys match the wire names
    (``catid``, ``Page``) and fields declared with
    :func:`~yapi.models.omit_empty` vanish when they hold a zero value.
    Booleans become ``true``/``false``; lists repeat the key.
    """
    if params is None:
        return []
    if isinstance(params, BaseModel):
        data = params.model_dump(mode="json", by_alias=True)
    else:
        data = dict(params)

    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if isinstance(item, bool):
                pairs.append((key, "true" if item else "false"))
            else:
                pairs.append((key, str(item)))
    return pairs


def check_response(response: httpx.Response) -> None:
    """Raise a typed exception unless the status code is in ``[200, 300)``.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ServerError: On 5xx.
        HTTPStatusError: On any other status outside the 2xx range.
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    body = response.text
    snippet = body.strip()[:200]
    message = f"HTTP {status}: {snippet}" if snippet else f"HTTP {status}"

    exc_type: type[HTTPStatusError]
    if status in (401, 403):
        exc_type = AuthError
    elif status == 404:
        exc_type = NotFoundError
    elif status >= 500:
        exc_type = ServerError
    else:
        exc_type = HTTPStatusError
    raise exc_type(message, status_code=status, body=body, response=response)


def _redact(url: httpx.URL) -> str:
    """Render *url* for logs with token values hidden."""
    if not any(name in url.params for name in _REDACTED_PARAMS):
        return str(url)
    params = [
        (k, "REDACTED" if k in _REDACTED_PARAMS else v) for k, v in url.params.multi_items()
    ]
    return str(url.copy_with(params=params))


class Transport:
    """Builds, sends and decodes requests relative to a base URL.

    Args:
        base_url: Root URL every relative path is joined to. Its path must
            end with ``/`` for relative resolution to succeed.
        http_client: Optional pre-configured :class:`httpx.Client`. When
            given, the caller keeps ownership and :meth:`close` leaves it
            open.
        request_config: Timeout, TLS verification and redirect limit for the
            client created when *http_client* is ``None``.

    Example::

        transport = Transport("http://yapi.example.com/")
        result = transport.get("api/project/get", params={"token": "t"}, model=dict)
        print(result.value["errcode"])
    """

    def __init__(
        self,
        base_url: Union[str, httpx.URL],
        http_client: Optional[httpx.Client] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self._base_url = httpx.URL(base_url)
        if http_client is None:
            config = request_config or RequestConfig()
            http_client = httpx.Client(
                timeout=config.timeout,
                verify=config.verify_ssl,
                follow_redirects=True,
                max_redirects=config.max_redirects,
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = http_client

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def http_client(self) -> httpx.Client:
        return self._client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------ #
    # Request construction
    # ------------------------------------------------------------------ #

    def resolve(self, path: str) -> httpx.URL:
        """Resolve *path* against the base URL.

        Absolute URLs are returned unchanged.

        Raises:
            ConfigError: If *path* cannot be parsed, or it is relative and the
                base URL path does not end with ``/``.
        """
        try:
            target = httpx.URL(path)
        except httpx.InvalidURL as exc:
            raise ConfigError(f"Invalid request path {path!r}: {exc}") from exc
        if target.is_absolute_url:
            return target
        if not self._base_url.path.endswith("/"):
            raise ConfigError(
                f"Base URL must have a trailing slash, but {self._base_url} does not"
            )
        return self._base_url.join(path)

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[QueryParams] = None,
    ) -> httpx.Request:
        """Build an :class:`httpx.Request` without sending it.

        A ``None`` body produces a request with no content and no
        ``Content-Type`` (httpx still sets ``Content-Length: 0`` on POST),
        which differs from a JSON ``""`` body. Any other body is JSON
        encoded; Pydantic models are dumped by alias.
        """
        url = self.resolve(path)
        query = encode_query(params)
        if query:
            url = url.copy_merge_params(query)

        headers = {"Accept": "application/json"}
        if body is None:
            return httpx.Request(method.upper(), url, headers=headers)

        if isinstance(body, BaseModel):
            body = body.model_dump(mode="json", by_alias=True)
        return httpx.Request(method.upper(), url, headers=headers, json=body)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def execute(self, request: httpx.Request, model: Any = None) -> ApiResult[Any]:
        """Send *request*, check the status and decode the body into *model*.

        Args:
            request: A request from :meth:`build_request`.
            model: Target type for the JSON body. ``None`` skips decoding and
                leaves ``value`` as ``None``.

        Returns:
            An :class:`~yapi.client.response.ApiResult`.

        Raises:
            httpx.RequestError: On network failure, timeout or redirect loop.
            HTTPStatusError: On a non-2xx status.
            DecodeError: If *model* is given and the body does not decode.
        """
        output = get_output()
        output.debug(f"{request.method} {_redact(request.url)}")
        try:
            response = self._client.send(request, follow_redirects=True)
        except httpx.RequestError as exc:
            output.debug(f"{type(exc).__name__}: {exc}")
            raise
        output.debug(f"HTTP {response.status_code} {response.reason_phrase}")

        check_response(response)

        raw = response.text
        value = decode_body(raw, model, response) if model is not None else None
        return ApiResult(value=value, raw=raw, response=response)

    def get(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        model: Any = None,
    ) -> ApiResult[Any]:
        """Send a GET with *params* encoded as the query string."""
        return self.execute(self.build_request("GET", path, params=params), model)

    def post(self, path: str, body: Any = None, model: Any = None) -> ApiResult[Any]:
        """Send a POST with *body* encoded as JSON."""
        return self.execute(self.build_request("POST", path, body=body), model)

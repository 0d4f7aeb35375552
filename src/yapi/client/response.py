"""Decoded-result container and JSON decoding for HTTP responses.

Every call through :class:`~yapi.client.transport.Transport` produces an
:class:`ApiResult`: the decoded value paired with the raw body text it was
decoded from, plus the :class:`httpx.Response` for callers that need headers
or the status line.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, Iterator, Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from yapi.exceptions import DecodeError

T = TypeVar("T")


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """A decoded value together with the raw body it came from.

    Unpacks as a pair, so ``project, raw = client.project.get()`` works.

    Attributes:
        value: The decoded payload (``None`` when no target type was given).
        raw: The response body as text.
        response: The underlying :class:`httpx.Response`.
    """

    value: T
    raw: str
    response: httpx.Response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.raw


@lru_cache(maxsize=64)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def decode_body(
    raw: str,
    target: type[T] | Any,
    response: Optional[httpx.Response] = None,
) -> T:
    """Decode *raw* JSON text into *target*.

    *target* may be a Pydantic model class or any type a
    :class:`pydantic.TypeAdapter` accepts (``dict``, ``list[int]``, ...).

    Raises:
        DecodeError: If the body is empty, is not valid JSON, or does not
            match *target*. The raw text and response are attached.
    """
    if not raw.strip():
        raise DecodeError("Empty response body", raw=raw, response=response)
    name = getattr(target, "__name__", repr(target))
    try:
        return _adapter(target).validate_json(raw)
    except ValidationError as exc:
        first = exc.errors()[0]["msg"] if exc.error_count() else str(exc)
        raise DecodeError(
            f"Cannot decode response as {name}: {first}",
            raw=raw,
            response=response,
        ) from exc

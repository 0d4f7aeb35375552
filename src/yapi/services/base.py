"""Shared plumbing for the resource services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yapi.client.transport import Transport
    from yapi.client.yapi_client import YapiClient


class Service:
    """Base class for services bound to one :class:`~yapi.client.YapiClient`.

    Services hold no state of their own; the token and transport are read
    from the client on every call.
    """

    def __init__(self, client: YapiClient) -> None:
        self._client = client

    @property
    def _transport(self) -> Transport:
        return self._client.transport

    @property
    def _token(self) -> str:
        return self._client.authentication.token

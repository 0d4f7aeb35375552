"""Client facade: one object owning the base URL, transport, token and services."""

from __future__ import annotations

from typing import Optional, Union

import httpx

from yapi.auth import Authentication
from yapi.client.transport import Transport
from yapi.exceptions import ConfigError
from yapi.models import Profile, RequestConfig
from yapi.services import CategoryMenuService, InterfaceService, ProjectService


def parse_base_url(base_url: Union[str, httpx.URL]) -> httpx.URL:
    """Validate *base_url* and make sure its path ends with ``/``.

    Raises:
        ConfigError: If the URL cannot be parsed, is not http(s), or has no host.
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigError(f"Invalid base URL {base_url!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigError(
            f"Invalid base URL {str(base_url)!r}: expected http(s)://host[/path]"
        )
    if not url.path.endswith("/"):
        url = url.copy_with(path=url.path + "/")
    return url


class YapiClient:
    """Typed client for a YApi instance.

    Exposes three services sharing one transport and one token:

    - :attr:`project` -- :class:`~yapi.services.ProjectService`
    - :attr:`cat_menu` -- :class:`~yapi.services.CategoryMenuService`
    - :attr:`interface` -- :class:`~yapi.services.InterfaceService`

    Args:
        base_url: Root URL of the YApi instance. A missing trailing slash is
            added.
        token: Project token sent with every request.
        http_client: Optional :class:`httpx.Client` to send requests with.
            The caller keeps ownership of an injected client.
        request_config: Settings for the client created when *http_client*
            is ``None``.

    Raises:
        ConfigError: If *base_url* is malformed.

    Example::

        with YapiClient("http://yapi.example.com", token="8cde...") as client:
            project, _ = client.project.get()
            menu, _ = client.cat_menu.get(project.data.id)
    """

    def __init__(
        self,
        base_url: Union[str, httpx.URL],
        token: str = "",
        http_client: Optional[httpx.Client] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self._base_url = parse_base_url(base_url)
        self.authentication = Authentication(token)
        self.transport = Transport(
            self._base_url,
            http_client=http_client,
            request_config=request_config,
        )
        self.project = ProjectService(self)
        self.cat_menu = CategoryMenuService(self)
        self.interface = InterfaceService(self)

    @classmethod
    def from_profile(
        cls,
        profile: Profile,
        token: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> YapiClient:
        """Build a client from a stored :class:`~yapi.models.Profile`.

        An explicit *token* wins over the profile's ``token_source``.
        """
        if token is None:
            token = (
                Authentication.from_source(profile.token_source).token
                if profile.token_source
                else ""
            )
        return cls(
            profile.base_url,
            token=token,
            http_client=http_client,
            request_config=profile.request,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> YapiClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"YapiClient(base_url={str(self._base_url)!r}, {self.authentication!r})"

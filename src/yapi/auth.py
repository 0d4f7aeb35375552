"""Token holder shared by every resource service.

YApi authenticates with a per-project ``token`` that travels inside the
request itself: as a query parameter on GET endpoints and as a body field on
POST endpoints. :class:`Authentication` only stores that token; each service
copies it into the flat parameter record it builds for a call.
"""

from __future__ import annotations

from yapi.config import resolve_credential


class Authentication:
    """Holds the project token set when the client is constructed.

    Args:
        token: The YApi project token. May be empty, in which case requests
            go out with an empty ``token`` and the remote service decides.

    Example::

        auth = Authentication("8cde6e3b...")
        assert auth.token.startswith("8cde")
    """

    def __init__(self, token: str = "") -> None:
        self._token = token

    @classmethod
    def from_source(cls, source: str) -> Authentication:
        """Build from a credential source (``env:VAR``, ``file:/path`` or a literal)."""
        return cls(resolve_credential(source))

    @property
    def token(self) -> str:
        return self._token

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def masked(self) -> str:
        """Return the token with all but the last four characters hidden."""
        if len(self._token) <= 4:
            return "*" * len(self._token)
        return "*" * 8 + self._token[-4:]

    def __repr__(self) -> str:
        return f"Authentication(token={self.masked()!r})"

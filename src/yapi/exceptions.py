"""Exception hierarchy for yapi.

All exceptions inherit from :class:`YapiError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`yapi.exit_codes`.
The CLI entry point in :func:`yapi.app.main` catches ``YapiError`` and
exits with the appropriate code.

Transport-level failures (connection refused, timeouts, redirect loops) are
*not* wrapped: they surface as the original :class:`httpx.RequestError`.

Subclass hierarchy::

    YapiError (exit 1)
    +-- ConfigError         (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- HTTPStatusError     (exit 5)
    |   +-- AuthError       (exit 3)
    |   +-- NotFoundError   (exit 4)
    |   +-- ServerError     (exit 5)
    +-- DecodeError         (exit 8)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from yapi.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)

if TYPE_CHECKING:
    import httpx


class YapiError(Exception):
    """Base exception for all yapi errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(YapiError):
    """Raised for configuration problems (malformed base URL, missing profiles, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(YapiError):
    """Raised for invalid CLI arguments or unreadable input files."""

    exit_code = EXIT_INVALID_USAGE


class HTTPStatusError(YapiError):
    """Raised when the remote service answers outside the 2xx range.

    The raw body is kept for diagnostics; it is usually a short HTML or
    plain-text page rather than a JSON envelope.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code of the response.
        body: The raw response text.
        response: The :class:`httpx.Response`, when available.
    """

    exit_code = EXIT_HTTP_ERROR

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.response = response


class AuthError(HTTPStatusError):
    """Raised on HTTP 401 / 403 (token rejected or lacking permission)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HTTPStatusError):
    """Raised when the remote service returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(HTTPStatusError):
    """Raised when the remote service returns an HTTP 5xx server error."""

    exit_code = EXIT_HTTP_ERROR


class DecodeError(YapiError):
    """Raised when a 2xx response body cannot be decoded into the expected type.

    Args:
        message: Human-readable error description.
        raw: The undecodable response text.
        response: The :class:`httpx.Response` the body came from.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(
        self,
        message: str,
        raw: str = "",
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message)
        self.raw = raw
        self.response = response

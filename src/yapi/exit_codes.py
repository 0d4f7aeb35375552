"""Numeric process exit codes for the ``yapi`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~yapi.exceptions.YapiError` subclass.
Shell wrappers can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ yapi interface 415
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the token was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The remote service answered HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_HTTP_ERROR = 5
"""The remote service answered with a non-2xx status (5xx and unmapped 4xx)."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, redirect loop)."""

EXIT_DECODE_ERROR = 8
"""The response body was not valid JSON or did not match the expected shape."""

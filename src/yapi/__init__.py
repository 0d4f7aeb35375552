"""yapi -- typed client for the YApi interface-documentation service.

Wraps the YApi open API (projects, category menus and interface definitions)
behind pydantic models and an :mod:`httpx` transport, plus a small ``yapi``
command line for the same operations.

Typical use::

    from yapi import YapiClient

    with YapiClient("http://yapi.example.com/", token="...") as client:
        project, raw = client.project.get()

Modules:
    app: Typer CLI entry point.
    client: Transport, decoded results and the :class:`YapiClient` facade.
    services: Project, category menu and interface services.
    models: Pydantic models for config, wire records and envelopes.
    config: XDG-aware profile storage and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"

from yapi.client import ApiResult, YapiClient  # noqa: E402

__all__ = ["ApiResult", "YapiClient", "__version__"]

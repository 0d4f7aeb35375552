"""Typer application and CLI entry point for yapi.

The ``yapi`` command exposes each client operation as a sub-command and
prints the decoded envelope. Connection settings come from a stored profile
(``yapi init``), with ``--base-url``/``--token`` and the ``YAPI_*``
environment variables taking precedence.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Expected failures exit with the code of their
:class:`~yapi.exceptions.YapiError`; anything else writes a crash log under
the data directory.
"""

from __future__ import annotations

import json
import os
import signal
import sys
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import httpx
import typer

from yapi import __version__
from yapi.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="yapi",
    help="Query and update a YApi interface-documentation server.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"yapi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="YApi root URL (overrides the profile)."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="Project token (overrides the profile's token source)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show request traces."
    ),
) -> None:
    """Initialise output and stash connection options in ``ctx.obj``."""
    from yapi.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_url"] = base_url
    ctx.obj["token"] = token


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextmanager
def _api_errors() -> Iterator[None]:
    """Turn library errors into an error line and an exit code."""
    from yapi.exceptions import YapiError
    from yapi.output import error

    try:
        yield
    except YapiError as exc:
        error(str(exc))
        raise typer.Exit(exc.exit_code)
    except httpx.RequestError as exc:
        error(f"Request failed: {type(exc).__name__}: {exc}")
        raise typer.Exit(EXIT_CONNECTION_ERROR)


def _build_client(ctx: typer.Context):
    """Create a :class:`~yapi.client.YapiClient` from the resolved config.

    Token precedence: ``--token`` > ``YAPI_TOKEN`` > profile ``token_source``.
    An ``http_client`` placed in ``ctx.obj`` is used for all requests.
    """
    from yapi.client import YapiClient
    from yapi.config import ENV_TOKEN, resolve_config
    from yapi.exceptions import ConfigError
    from yapi.output import debug, warning

    obj = ctx.obj or {}
    _, profile = resolve_config(
        cli_profile=obj.get("profile"),
        cli_base_url=obj.get("base_url"),
    )
    if profile is None:
        raise ConfigError(
            "No profile configured. Run 'yapi init' or pass --base-url."
        )
    token = obj.get("token") or os.environ.get(ENV_TOKEN) or None
    debug(f"Using profile '{profile.name}' at {profile.base_url}")
    client = YapiClient.from_profile(profile, token=token, http_client=obj.get("http_client"))
    if not client.authentication.has_token:
        warning("No token configured; requests go out with an empty token.")
    return client


def _emit(envelope: Any) -> None:
    """Print a decoded envelope and warn when the server reported an errcode."""
    from yapi.output import format_response, warning

    if not envelope.ok:
        warning(f"errcode {envelope.errcode}: {envelope.errmsg}")
    format_response(envelope.model_dump(mode="json", by_alias=True))


def _read_json_file(path: Path) -> Any:
    from yapi.exceptions import InvalidUsageError

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise InvalidUsageError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"{path} is not valid JSON: {exc}") from exc


def _describe_source(source: Optional[str]) -> str:
    """Show env:/file: sources as-is and hide literal tokens."""
    if not source:
        return ""
    if source.startswith(("env:", "file:")):
        return source
    return "(literal)"


def _is_table_format() -> bool:
    from yapi.output import OutputFormat, get_output

    return get_output().format != OutputFormat.JSON


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("init")
def init_command(
    name: str = typer.Argument(..., help="Profile name."),
    base_url: str = typer.Option(..., "--base-url", help="YApi root URL."),
    token_source: Optional[str] = typer.Option(
        None,
        "--token-source",
        help="Where to read the token: env:VAR, file:/path, or a literal token.",
    ),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    make_default: bool = typer.Option(
        True, "--default/--no-default", help="Make this the default profile."
    ),
) -> None:
    """Save a connection profile."""
    from yapi.client import parse_base_url
    from yapi.config import (
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from yapi.models import Profile, RequestConfig
    from yapi.output import info, success

    with _api_errors():
        url = parse_base_url(base_url)
        profile = Profile(
            name=name,
            base_url=str(url),
            token_source=token_source,
            request=RequestConfig(timeout=timeout),
        )
        if profile_exists(name):
            info(f"Profile '{name}' already exists and will be overwritten.")
        save_profile(profile)
        if make_default:
            cfg = load_global_config()
            cfg.default_profile = name
            save_global_config(cfg)
    success(f"Saved profile '{name}' ({url})")


@app.command("profiles")
def profiles_command() -> None:
    """List saved profiles; the default one is marked with *."""
    from yapi.config import list_profiles, load_global_config, load_profile
    from yapi.output import info, print_table

    with _api_errors():
        default = load_global_config().default_profile
        names = list_profiles()
        profiles = [load_profile(name) for name in names]
    if not profiles:
        info("No profiles saved. Run 'yapi init' to add one.")
        return
    print_table(
        ["name", "base_url", "token_source", "default"],
        [
            [
                p.name,
                p.base_url,
                _describe_source(p.token_source),
                "*" if p.name == default else "",
            ]
            for p in profiles
        ],
        title="Profiles",
    )


@app.command("delete-profile")
def delete_profile_command(
    name: str = typer.Argument(..., help="Profile name."),
) -> None:
    """Delete a saved profile."""
    from yapi.config import delete_profile, load_global_config, save_global_config
    from yapi.output import success

    with _api_errors():
        delete_profile(name)
        cfg = load_global_config()
        if cfg.default_profile == name:
            cfg.default_profile = None
            save_global_config(cfg)
    success(f"Deleted profile '{name}'")


@app.command("project")
def project_command(ctx: typer.Context) -> None:
    """Show the project the token belongs to."""
    with _api_errors():
        with _build_client(ctx) as client:
            result = client.project.get()
    _emit(result.value)


@app.command("cats")
def cats_command(
    ctx: typer.Context,
    project_id: int = typer.Argument(..., help="Project id."),
) -> None:
    """List the categories of a project."""
    from yapi.output import print_table

    with _api_errors():
        with _build_client(ctx) as client:
            result = client.cat_menu.get(project_id)
    menu = result.value
    if _is_table_format() and menu.ok:
        print_table(
            ["id", "name", "desc"],
            [[str(c.id), c.name, c.desc] for c in menu.data],
            title=f"Categories of project {project_id}",
        )
    else:
        _emit(menu)


@app.command("add-cat")
def add_cat_command(
    ctx: typer.Context,
    project_id: int = typer.Argument(..., help="Project id."),
    name: str = typer.Argument(..., help="Category name."),
    desc: str = typer.Option("", "--desc", help="Category description."),
) -> None:
    """Create a category, or update the one with the same name."""
    from yapi.models import ModifyMenuParam

    with _api_errors():
        with _build_client(ctx) as client:
            result = client.cat_menu.add_or_update(
                ModifyMenuParam(project_id=project_id, name=name, desc=desc)
            )
    _emit(result.value)


@app.command("interfaces")
def interfaces_command(
    ctx: typer.Context,
    cat_id: int = typer.Option(0, "--cat-id", help="Category id (0 = all)."),
    page: int = typer.Option(1, "--page", help="Page number, starting at 1."),
    limit: int = typer.Option(20, "--limit", help="Items per page."),
) -> None:
    """List interface definitions."""
    from yapi.models import InterfaceListParam
    from yapi.output import print_table

    with _api_errors():
        with _build_client(ctx) as client:
            result = client.interface.get_list(
                InterfaceListParam(cat_id=cat_id, page=page, limit=limit)
            )
    listing = result.value
    if _is_table_format() and listing.ok:
        print_table(
            ["id", "method", "path", "title"],
            [[str(i.id), i.method, i.path, i.title] for i in listing.data.list_],
            title=f"{listing.data.count} of {listing.data.total} interfaces",
        )
    else:
        _emit(listing)


@app.command("interface")
def interface_command(
    ctx: typer.Context,
    interface_id: int = typer.Argument(..., help="Interface id."),
) -> None:
    """Show one interface definition."""
    with _api_errors():
        with _build_client(ctx) as client:
            result = client.interface.get(interface_id)
    _emit(result.value)


@app.command("save")
def save_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file holding an interface record."),
) -> None:
    """Create (``_id`` 0 or absent) or update an interface definition."""
    from pydantic import ValidationError

    from yapi.exceptions import InvalidUsageError
    from yapi.models import InterfaceData

    with _api_errors():
        try:
            data = InterfaceData.model_validate(_read_json_file(file))
        except ValidationError as exc:
            raise InvalidUsageError(f"{file} is not an interface record: {exc}") from exc
        with _build_client(ctx) as client:
            result = client.interface.add_or_update(data)
    _emit(result.value)


@app.command("import-swagger")
def import_swagger_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Swagger / OpenAPI JSON document."),
) -> None:
    """Bulk-import a Swagger document, merging with existing definitions."""
    with _api_errors():
        document = _read_json_file(file)
        with _build_client(ctx) as client:
            result = client.interface.upload_swagger(document)
    _emit(result.value)


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from yapi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``yapi`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from yapi.exceptions import YapiError
        from yapi.output import error

        if isinstance(exc, YapiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)

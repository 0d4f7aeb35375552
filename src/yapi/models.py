"""Canonical Pydantic models shared across all yapi modules.

This is the single source of truth for data shapes in the project. The
models fall into four groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`GlobalConfig`,
    and :class:`Profile`.

**Wire records** -- the payloads carried inside response envelopes:
    :class:`ProjectData` (with :class:`ProjectEnv`, :class:`EnvHeader`,
    :class:`EnvGlobal`), :class:`CatData`, :class:`InterfaceData` (with
    :class:`ReqKVItemSimple`, :class:`ReqKVItemDetail`),
    :class:`InterfaceListData`, and :class:`ModifyResult`.

**Envelopes** -- ``{"errcode", "errmsg", "data"}`` wrappers returned by every
endpoint: :class:`Project`, :class:`CatMenu`, :class:`ModifyMenuResp`,
:class:`Interface`, :class:`InterfaceList`, and :class:`ModifyResp`.

**Request parameters** -- one flat record per endpoint, each carrying the
token: :class:`ProjectParam`, :class:`CatMenuParam`, :class:`AddCatRequest`,
:class:`InterfaceParam`, :class:`InterfaceListParam`, and
:class:`UploadSwaggerRequest`.

Wire models derive from :class:`YapiModel`. Fields declared with
:func:`omit_empty` are dropped from ``model_dump`` output (and therefore from
query strings and JSON bodies) when they hold their type's zero value.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)


def omit_empty(default: Any = None, **kwargs: Any) -> Any:
    """Declare a field that is omitted on serialisation when empty.

    Accepts the same keyword arguments as :func:`pydantic.Field`.
    """
    if "default_factory" in kwargs:
        return Field(json_schema_extra={"omitempty": True}, **kwargs)
    return Field(default, json_schema_extra={"omitempty": True}, **kwargs)


def _is_zero(value: Any) -> bool:
    """Return True for ``None``, ``0``, ``""``, ``False`` and empty containers."""
    if value is None:
        return True
    if isinstance(value, (bool, int, float, str, list, tuple, dict)):
        return not value
    return False


class YapiModel(BaseModel):
    """Base class for every wire model.

    Fields may be populated by name or by alias (``id`` or ``_id``). Explicit
    ``null`` values in incoming JSON fall back to the field default, so a
    ``"tag": null`` in a response yields an empty list.
    """

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @model_serializer(mode="wrap")
    def _drop_empty(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        for name, field in type(self).model_fields.items():
            extra = field.json_schema_extra
            if not (isinstance(extra, dict) and extra.get("omitempty")):
                continue
            key = field.alias if (info.by_alias and field.alias) else name
            if key in data and _is_zero(data[key]):
                del data[key]
        return data


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to the underlying :class:`httpx.Client`."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_redirects: int = Field(
        default=10, description="Redirects followed before giving up"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/yapi/config.json``.

    Fields here have the lowest precedence; see
    :func:`~yapi.config.resolve_config` for the full chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """A stored connection to one YApi instance.

    The token itself is never written to the profile; ``token_source``
    names where to read it from (see :func:`~yapi.config.resolve_credential`).
    """

    name: str
    base_url: str = Field(description="Root URL of the YApi instance")
    token_source: Optional[str] = Field(
        default=None, description="Token source: env:VAR, file:/path, or literal"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Project ---


class EnvHeader(YapiModel):
    id: str = omit_empty("", alias="_id")
    name: str = omit_empty("")
    value: str = omit_empty("")


class EnvGlobal(YapiModel):
    id: str = omit_empty("", alias="_id")
    name: str = omit_empty("")
    value: str = omit_empty("")


class ProjectEnv(YapiModel):
    """One deployment environment configured on a project."""

    header: list[EnvHeader] = omit_empty(default_factory=list)
    global_: list[EnvGlobal] = omit_empty(default_factory=list, alias="global")
    id: str = Field("", alias="_id")
    name: str = ""
    domain: str = ""


class ProjectData(YapiModel):
    id: int = Field(0, alias="_id")
    uid: int = 0
    group_id: int = 0
    name: str = ""
    role: bool = False
    env: list[ProjectEnv] = Field(default_factory=list)


# --- Envelopes ---


class CommonResp(YapiModel):
    """Fields shared by every response envelope.

    ``errcode`` is the remote application's own status; it is never turned
    into an exception. Use :attr:`ok` to check it.
    """

    errcode: int = 0
    errmsg: str = ""

    @property
    def ok(self) -> bool:
        """True when the remote service reported ``errcode == 0``."""
        return self.errcode == 0


class Project(CommonResp):
    data: ProjectData = Field(default_factory=ProjectData)


# --- Category menu ---


class CatData(YapiModel):
    id: int = Field(0, alias="_id")
    uid: int = 0
    name: str = ""
    desc: str = ""


class CatMenu(CommonResp):
    data: list[CatData] = Field(default_factory=list)


class ModifyMenuParam(YapiModel):
    """Caller-facing input for creating or renaming a category."""

    project_id: int
    name: str
    desc: str = ""


class ModifyResult(YapiModel):
    """MongoDB-style write summary returned by some update endpoints."""

    ok: int = 0
    n_modified: int = Field(0, alias="nModified")
    n: int = 0


class ModifyResp(CommonResp):
    """Envelope for write endpoints whose ``data`` shape varies."""

    data: Any = None

    def result(self) -> ModifyResult:
        """Interpret ``data`` as a :class:`ModifyResult` write summary."""
        if isinstance(self.data, dict):
            return ModifyResult.model_validate(self.data)
        return ModifyResult()


class ModifyMenuResp(ModifyResp):
    pass


# --- Interface ---


class ReqKVItemSimple(YapiModel):
    name: str = ""
    value: str = ""
    example: str = ""
    desc: str = ""


class ReqKVItemDetail(ReqKVItemSimple):
    type: str = ""
    required: str = ""


class InterfaceData(YapiModel):
    """A full interface definition: route, parameter schemas and response schema.

    ``id == 0`` marks a definition that has not been created yet;
    :meth:`~yapi.services.interface.InterfaceService.add_or_update` sends it
    as a create, any other id as an update.
    """

    id: int = Field(0, alias="_id")
    uid: int = 0
    cat_id: int = Field(0, alias="catid")
    project_id: int = 0
    edit_uid: int = 0
    add_time: int = 0
    up_time: int = 0
    status: str = ""
    title: str = ""
    path: str = ""
    method: str = ""
    tag: list[str] = Field(default_factory=list)

    req_params: list[ReqKVItemSimple] = Field(default_factory=list)
    req_headers: list[ReqKVItemDetail] = Field(default_factory=list)
    req_query: list[ReqKVItemDetail] = Field(default_factory=list)
    req_body_form: list[ReqKVItemDetail] = Field(default_factory=list)
    req_body_is_json_schema: bool = False
    req_body_type: str = ""
    req_body_other: str = ""

    res_body_is_json_schema: bool = False
    res_body_type: str = ""
    res_body: str = ""

    @property
    def is_new(self) -> bool:
        return self.id == 0


class Interface(CommonResp):
    data: InterfaceData = Field(default_factory=InterfaceData)


class InterfaceListData(YapiModel):
    count: int = 0
    total: int = 0
    list_: list[InterfaceData] = Field(default_factory=list, alias="list")


class InterfaceList(CommonResp):
    data: InterfaceListData = Field(default_factory=InterfaceListData)


# --- Request parameters ---


class ProjectParam(YapiModel):
    token: str


class CatMenuParam(YapiModel):
    token: str
    project_id: int


class AddCatRequest(YapiModel):
    token: str
    project_id: int
    name: str
    desc: str = ""


class InterfaceParam(YapiModel):
    token: str
    id: int


class InterfaceListParam(YapiModel):
    """Pagination and filter for listing interfaces.

    ``cat_id`` of 0 lists across every category the token can see. ``page``
    and ``limit`` have no local defaults; out-of-range values simply produce
    an empty page from the remote service.
    """

    token: str = omit_empty("")
    cat_id: int = omit_empty(0, alias="catid")
    page: int = Field(alias="Page")
    limit: int


class UploadSwaggerRequest(YapiModel):
    token: str
    type: str = "swagger"
    merge: str = "merge"
    spec_json: str = Field(alias="json")

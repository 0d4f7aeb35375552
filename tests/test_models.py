"""Tests for yapi.models -- aliases, empty-field omission, null handling."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from yapi.models import (
    CatData,
    EnvHeader,
    InterfaceData,
    InterfaceListParam,
    ModifyMenuParam,
    ModifyResp,
    Profile,
    ProjectEnv,
    ReqKVItemDetail,
    UploadSwaggerRequest,
)


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------


class TestAliases:
    def test_id_populated_by_alias_or_name(self) -> None:
        assert CatData.model_validate({"_id": 5}).id == 5
        assert CatData(id=5).id == 5

    def test_dump_by_alias_uses_wire_names(self) -> None:
        data = InterfaceData(id=1, cat_id=2).model_dump(by_alias=True)
        assert data["_id"] == 1
        assert data["catid"] == 2
        assert "cat_id" not in data

    def test_upload_request_json_field(self) -> None:
        body = UploadSwaggerRequest(token="T", spec_json="{}").model_dump(by_alias=True)
        assert body == {"token": "T", "type": "swagger", "merge": "merge", "json": "{}"}


# ---------------------------------------------------------------------------
# Empty-field omission
# ---------------------------------------------------------------------------


class TestOmitEmpty:
    def test_empty_env_lists_dropped(self) -> None:
        env = ProjectEnv(id="e1", name="local", domain="http://localhost")
        assert env.model_dump(by_alias=True) == {
            "_id": "e1",
            "name": "local",
            "domain": "http://localhost",
        }

    def test_populated_env_lists_kept(self) -> None:
        env = ProjectEnv(header=[EnvHeader(name="X-Trace", value="1")])
        dumped = env.model_dump(by_alias=True)
        assert dumped["header"] == [{"name": "X-Trace", "value": "1"}]
        assert "global" not in dumped

    def test_omission_applies_without_alias(self) -> None:
        dumped = InterfaceListParam(page=1, limit=5).model_dump()
        assert dumped == {"page": 1, "limit": 5}

    def test_non_omitted_zero_fields_kept(self) -> None:
        dumped = CatData().model_dump(by_alias=True)
        assert dumped == {"_id": 0, "uid": 0, "name": "", "desc": ""}


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class TestDecoding:
    def test_nulls_fall_back_to_defaults(self) -> None:
        data = InterfaceData.model_validate({"_id": 1, "tag": None, "title": None})
        assert data.tag == []
        assert data.title == ""

    def test_unknown_fields_ignored(self) -> None:
        item = ReqKVItemDetail.model_validate({"name": "id", "required": "1", "_id": "x"})
        assert item.required == "1"
        assert not hasattr(item, "_id")

    def test_is_new(self) -> None:
        assert InterfaceData().is_new
        assert not InterfaceData(id=3).is_new

    def test_list_param_requires_page_and_limit(self) -> None:
        with pytest.raises(ValidationError):
            InterfaceListParam(cat_id=1)

    def test_menu_param_requires_name(self) -> None:
        with pytest.raises(ValidationError):
            ModifyMenuParam(project_id=1)


# ---------------------------------------------------------------------------
# Write summaries
# ---------------------------------------------------------------------------


class TestModifyResp:
    def test_result_from_summary(self) -> None:
        resp = ModifyResp.model_validate(
            {"errcode": 0, "errmsg": "成功！", "data": {"ok": 1, "nModified": 2, "n": 3}}
        )
        summary = resp.result()
        assert (summary.ok, summary.n_modified, summary.n) == (1, 2, 3)

    @pytest.mark.parametrize("data", [None, [], "done", [{"_id": 1}]])
    def test_result_defaults_for_other_shapes(self, data) -> None:
        resp = ModifyResp.model_validate({"errcode": 0, "data": data})
        assert resp.result().ok == 0

    def test_ok_reflects_errcode(self) -> None:
        assert ModifyResp(errcode=0).ok
        assert not ModifyResp(errcode=40011).ok


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestProfile:
    def test_defaults(self) -> None:
        profile = Profile(name="p", base_url="http://h/")
        assert profile.token_source is None
        assert profile.request.timeout == 30
        assert profile.request.verify_ssl is True

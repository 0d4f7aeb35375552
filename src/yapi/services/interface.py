"""Interface definition endpoints: list, fetch, upsert, and bulk import."""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

from yapi.client.response import ApiResult
from yapi.models import (
    Interface,
    InterfaceData,
    InterfaceList,
    InterfaceListParam,
    InterfaceParam,
    ModifyResp,
    UploadSwaggerRequest,
)
from yapi.output import get_output
from yapi.services.base import Service


class InterfaceService(Service):
    """Access to interface (endpoint) definitions documented in a project."""

    LIST_ENDPOINT = "api/interface/list_cat"
    GET_ENDPOINT = "api/interface/get"
    SAVE_ENDPOINT = "api/interface/save"
    IMPORT_ENDPOINT = "api/open/import_data"

    def get_list(self, params: InterfaceListParam) -> ApiResult[InterfaceList]:
        """List one page of interfaces.

        Args:
            params: ``cat_id`` of 0 lists every category visible to the
                token; ``page`` and ``limit`` are sent as given. The caller's
                object is left untouched.
        """
        query = InterfaceListParam(
            token=self._token,
            cat_id=params.cat_id,
            page=params.page,
            limit=params.limit,
        )
        return self._transport.get(self.LIST_ENDPOINT, params=query, model=InterfaceList)

    def get(self, id: int) -> ApiResult[Interface]:
        """Fetch a single interface definition by id."""
        params = InterfaceParam(token=self._token, id=id)
        return self._transport.get(self.GET_ENDPOINT, params=params, model=Interface)

    def add_or_update(self, data: InterfaceData) -> ApiResult[ModifyResp]:
        """Save a full interface definition.

        ``data.id == 0`` creates a new interface; any other id updates the
        existing one. The ``_id`` field is sent as-is so the server applies
        that rule.
        """
        get_output().debug(
            f"{'Creating' if data.is_new else 'Updating'} interface "
            f"{data.method} {data.path} (id={data.id})"
        )
        body: dict[str, Any] = {"token": self._token}
        body.update(data.model_dump(mode="json", by_alias=True))
        return self._transport.post(self.SAVE_ENDPOINT, body=body, model=ModifyResp)

    def upload_swagger(
        self, spec_json: Union[str, Mapping[str, Any]]
    ) -> ApiResult[ModifyResp]:
        """Import a whole Swagger/OpenAPI document, merging with existing definitions.

        Args:
            spec_json: The document as JSON text, or an already parsed mapping.
        """
        if not isinstance(spec_json, str):
            spec_json = json.dumps(spec_json, ensure_ascii=False)
        body = UploadSwaggerRequest(token=self._token, spec_json=spec_json)
        return self._transport.post(self.IMPORT_ENDPOINT, body=body, model=ModifyResp)

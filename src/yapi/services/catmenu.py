"""Category menu endpoints: list and upsert categories within a project."""

from __future__ import annotations

from yapi.client.response import ApiResult
from yapi.models import AddCatRequest, CatMenu, CatMenuParam, ModifyMenuParam, ModifyMenuResp
from yapi.services.base import Service


class CategoryMenuService(Service):
    """Categories group interface definitions inside a project."""

    GET_ENDPOINT = "api/interface/getCatMenu"
    ADD_ENDPOINT = "api/interface/add_cat"

    def get(self, project_id: int) -> ApiResult[CatMenu]:
        """List the categories of *project_id* in the order the server keeps them."""
        params = CatMenuParam(token=self._token, project_id=project_id)
        return self._transport.get(self.GET_ENDPOINT, params=params, model=CatMenu)

    def add_or_update(self, params: ModifyMenuParam) -> ApiResult[ModifyMenuResp]:
        """Create the category, or update it if the server already has one by that name.

        Whether the call creates or updates is decided remotely. It never
        deletes a category.
        """
        body = AddCatRequest(
            token=self._token,
            project_id=params.project_id,
            name=params.name,
            desc=params.desc,
        )
        return self._transport.post(self.ADD_ENDPOINT, body=body, model=ModifyMenuResp)

"""Project endpoint."""

from __future__ import annotations

from yapi.client.response import ApiResult
from yapi.models import Project, ProjectParam
from yapi.services.base import Service


class ProjectService(Service):
    """Read access to the project the token belongs to."""

    GET_ENDPOINT = "api/project/get"

    def get(self) -> ApiResult[Project]:
        """Fetch the token's project, including its environments.

        Returns:
            ``ApiResult[Project]``; ``result.value.data.id`` is the project id
            the other services expect.
        """
        params = ProjectParam(token=self._token)
        return self._transport.get(self.GET_ENDPOINT, params=params, model=Project)

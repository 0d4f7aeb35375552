"""Resource services exposed on :class:`~yapi.client.YapiClient`."""

from yapi.services.catmenu import CategoryMenuService
from yapi.services.interface import InterfaceService
from yapi.services.project import ProjectService

__all__ = ["CategoryMenuService", "InterfaceService", "ProjectService"]

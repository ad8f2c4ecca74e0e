from fastapi import APIRouter

from usercrud.crud.route_templates.basic import IRouteTemplate
from usercrud.crud.route_templates.create import CreateRouteTemplate
from usercrud.crud.route_templates.delete import DeleteRouteTemplate
from usercrud.crud.route_templates.get import ReadRouteTemplate
from usercrud.crud.route_templates.options import OptionsRouteTemplate
from usercrud.crud.route_templates.search import ListRouteTemplate
from usercrud.crud.route_templates.update import PatchRouteTemplate, UpdateRouteTemplate
from usercrud.resource_manager.basic import IUserRepository
from usercrud.resource_manager.resource_store.simple import MemoryUserRepository
from usercrud.types import DEFAULT_PAGE_SIZE


def default_route_templates(
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> list[IRouteTemplate]:
    return [
        CreateRouteTemplate(),
        ReadRouteTemplate(),
        ListRouteTemplate(default_page_size=default_page_size),
        OptionsRouteTemplate(),
        UpdateRouteTemplate(),
        PatchRouteTemplate(),
        DeleteRouteTemplate(),
    ]


class UserCRUD:
    """擁有使用者 repository 與路由模板，負責產生 FastAPI 路由"""

    def __init__(
        self,
        repository: IUserRepository | None = None,
        *,
        model_name: str = "users",
    ):
        self.repository = MemoryUserRepository() if repository is None else repository
        self.model_name = model_name
        self.route_templates: list[IRouteTemplate] = []

    def add_route_template(self, template: IRouteTemplate) -> None:
        """添加路由模板"""
        self.route_templates.append(template)

    def apply(self, router: APIRouter) -> APIRouter:
        """將所有路由模板依 order 應用到路由器"""
        for route_template in sorted(self.route_templates):
            route_template.apply(self.model_name, self.repository, router)
        return router

from fastapi import APIRouter, Response

from usercrud.crud.route_templates.basic import BaseRouteTemplate
from usercrud.resource_manager.basic import IUserRepository

ALLOWED_COLLECTION_METHODS = ("POST", "GET", "OPTIONS")


class OptionsRouteTemplate(BaseRouteTemplate):
    """回應集合可用 HTTP 方法的路由模板"""

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.options(
            f"/{model_name}",
            summary=f"Allowed methods on {model_name}",
            tags=[model_name],
        )
        async def get_users_options():
            return Response(
                status_code=200,
                headers={"Allow": ", ".join(ALLOWED_COLLECTION_METHODS)},
            )

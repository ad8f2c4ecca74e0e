import logging
import textwrap

from fastapi import APIRouter, Response

from usercrud.crud.route_templates.basic import BaseRouteTemplate, find_user_or_404
from usercrud.resource_manager.basic import IUserRepository

logger = logging.getLogger(__name__)


class DeleteRouteTemplate(BaseRouteTemplate):
    """刪除使用者的路由模板"""

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.delete(
            f"/{model_name}/{{user_id}}",
            status_code=204,
            summary=f"Delete {model_name}",
            tags=[model_name],
            description=textwrap.dedent(
                f"""
                Permanently remove a `{model_name}` record.

                The id may be reused later only by an explicit `PUT` to the same id.

                **Error Responses:**
                - `404`: The id is not a valid UUID or no record has it""",
            ),
        )
        async def delete_user(user_id: str):
            # 404 取決於事前的存在檢查，repository.delete 本身對不存在的 id 不報錯
            user = find_user_or_404(repository, user_id)
            repository.delete(user.id)
            logger.info("Deleted user %s", user.id)
            return Response(status_code=204)

import textwrap

from fastapi import APIRouter, Depends, Response

from usercrud.crud.formatters import MediaType, NegotiatedResponse, negotiated_media_type
from usercrud.crud.mapping import entity_to_user_dto
from usercrud.crud.route_templates.basic import (
    GET_USER_ROUTE_NAME,
    BaseRouteTemplate,
    find_user_or_404,
)
from usercrud.resource_manager.basic import IUserRepository


class ReadRouteTemplate(BaseRouteTemplate):
    """讀取單一使用者的路由模板 (GET 與 HEAD)"""

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.get(
            f"/{model_name}/{{user_id}}",
            name=GET_USER_ROUTE_NAME,
            summary=f"Get {model_name} by ID",
            tags=[model_name],
            description=textwrap.dedent(
                f"""
                Retrieve a single `{model_name}` record.

                **Content Negotiation:**
                - `Accept: application/json` (default) or `application/xml`
                - Any other media type is rejected with `406`

                **Error Responses:**
                - `404`: The id is not a valid UUID or no record has it""",
            ),
        )
        async def get_user_by_id(
            user_id: str,
            media_type: MediaType = Depends(negotiated_media_type),
        ):
            user = find_user_or_404(repository, user_id)
            return NegotiatedResponse(entity_to_user_dto(user), media_type=media_type)

        @router.head(
            f"/{model_name}/{{user_id}}",
            summary=f"Check {model_name} exists",
            tags=[model_name],
        )
        async def head_user_by_id(
            user_id: str,
            media_type: MediaType = Depends(negotiated_media_type),
        ):
            find_user_or_404(repository, user_id)
            response = Response(status_code=200)
            response.headers["Content-Type"] = str(media_type)
            return response

import logging
import textwrap

from fastapi import APIRouter, Depends, Request

from usercrud.crud.formatters import MediaType, NegotiatedResponse, negotiated_media_type
from usercrud.crud.mapping import create_dto_to_entity
from usercrud.crud.route_templates.basic import (
    BaseRouteTemplate,
    location_of,
    model_to_request_body,
    read_json_body,
    validate_dto,
)
from usercrud.crud.schemas import CreateUserDto
from usercrud.resource_manager.basic import IUserRepository

logger = logging.getLogger(__name__)


class CreateRouteTemplate(BaseRouteTemplate):
    """創建使用者的路由模板"""

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.post(
            f"/{model_name}",
            status_code=201,
            summary=f"Create {model_name}",
            tags=[model_name],
            openapi_extra=model_to_request_body(CreateUserDto),
            description=textwrap.dedent(
                f"""
                Create a new `{model_name}` record. The server assigns the id.

                **Response:**
                - `201` with the new id as body and a `Location` header

                **Error Responses:**
                - `400`: Body is empty, null or not a JSON object
                - `422`: Field validation failed (e.g. login is not alphanumeric)""",
            ),
        )
        async def create_user(
            request: Request,
            media_type: MediaType = Depends(negotiated_media_type),
        ):
            payload = await read_json_body(request, dict)
            dto = validate_dto(CreateUserDto, payload)
            user = repository.insert(create_dto_to_entity(dto))
            logger.info("Created user %s", user.id)
            return NegotiatedResponse(
                user.id,
                status_code=201,
                media_type=media_type,
                headers={"Location": location_of(request, user.id)},
            )

import logging
import textwrap

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from jsonpatch import JsonPatch, JsonPatchException
from jsonpointer import JsonPointerException

from usercrud.crud.formatters import (
    JSON_PATCH_MEDIA_TYPE,
    MediaType,
    NegotiatedResponse,
    negotiated_media_type,
)
from usercrud.crud.mapping import (
    entity_to_patch_projection,
    merge_update_dto,
    update_dto_to_entity,
)
from usercrud.crud.route_templates.basic import (
    BaseRouteTemplate,
    find_user_or_404,
    location_of,
    model_to_request_body,
    parse_user_id,
    read_json_body,
    validate_dto,
)
from usercrud.crud.schemas import UpdateUserDto
from usercrud.resource_manager.basic import IUserRepository, ResourceIDNotFoundError

logger = logging.getLogger(__name__)

JSON_PATCH_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["op", "path"],
        "properties": {
            "op": {
                "type": "string",
                "enum": ["add", "remove", "replace", "move", "copy", "test"],
            },
            "path": {"type": "string"},
            "from": {"type": "string"},
            "value": {},
        },
    },
}


class UpdateRouteTemplate(BaseRouteTemplate):
    """以 PUT 更新或新增使用者的路由模板"""

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.put(
            f"/{model_name}/{{user_id}}",
            summary=f"Update or insert {model_name}",
            tags=[model_name],
            openapi_extra=model_to_request_body(UpdateUserDto),
            description=textwrap.dedent(
                f"""
                Replace a `{model_name}` record, or create it with the given id.

                **Response:**
                - `204`: An existing record was updated; `createdAt` is kept
                - `201`: A new record was created with the id from the path

                **Error Responses:**
                - `400`: Body is empty/null, or the id is not a valid UUID
                - `422`: Field validation failed""",
            ),
        )
        async def update_user(
            user_id: str,
            request: Request,
            media_type: MediaType = Depends(negotiated_media_type),
        ):
            payload = await read_json_body(request, dict)
            parsed_id = parse_user_id(user_id)
            if parsed_id is None:
                raise HTTPException(
                    status_code=400, detail=f"Malformed user id '{user_id}'"
                )
            dto = validate_dto(UpdateUserDto, payload)
            user, inserted = repository.update_or_insert(
                update_dto_to_entity(parsed_id, dto)
            )
            if not inserted:
                return Response(status_code=204)
            logger.info("Created user %s with given id", user.id)
            return NegotiatedResponse(
                user.id,
                status_code=201,
                media_type=media_type,
                headers={"Location": location_of(request, user.id)},
            )


class PatchRouteTemplate(BaseRouteTemplate):
    """以 JSON Patch 部分更新使用者的路由模板

    Patch 先套用在 UpdateUserDto 形狀的投影上，驗證通過後才寫回 repository，
    任何一步失敗都不會改動已儲存的使用者。
    """

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        patchable_fields = {
            field.alias or name for name, field in UpdateUserDto.model_fields.items()
        }

        @router.patch(
            f"/{model_name}/{{user_id}}",
            summary=f"Partially update {model_name}",
            tags=[model_name],
            openapi_extra=model_to_request_body(
                media_type=JSON_PATCH_MEDIA_TYPE, schema=JSON_PATCH_SCHEMA
            ),
            description=textwrap.dedent(
                f"""
                Apply RFC 6902 JSON Patch operations to a `{model_name}` record.

                **Request:**
                - `Content-Type: {JSON_PATCH_MEDIA_TYPE}`
                - Paths address the update fields: `/login`, `/firstName`, `/lastName`

                **Error Responses:**
                - `400`: Patch document is empty, null or not an array
                - `404`: The id is not a valid UUID or no record has it
                - `415`: Content type is not `{JSON_PATCH_MEDIA_TYPE}`
                - `422`: The patch cannot be applied or the result is invalid""",
            ),
        )
        async def patch_user(user_id: str, request: Request):
            content_type = request.headers.get("content-type", "")
            if content_type.split(";")[0].strip().lower() != JSON_PATCH_MEDIA_TYPE:
                raise HTTPException(
                    status_code=415,
                    detail=f"Patch document must be {JSON_PATCH_MEDIA_TYPE}",
                )
            document = await read_json_body(request, list)
            user = find_user_or_404(repository, user_id)

            try:
                projection = JsonPatch(document).apply(
                    entity_to_patch_projection(user)
                )
            except (JsonPatchException, JsonPointerException, KeyError, TypeError) as e:
                logger.info("Rejected patch for user %s: %s", user.id, e)
                raise HTTPException(status_code=422, detail={"JsonPatch": [str(e)]})
            if isinstance(projection, dict):
                unknown = sorted(set(projection) - patchable_fields)
                if unknown:
                    raise HTTPException(
                        status_code=422,
                        detail={
                            "JsonPatch": [
                                f"The target location '{name}' was not found."
                                for name in unknown
                            ]
                        },
                    )
            dto = validate_dto(UpdateUserDto, projection)

            try:
                repository.update(merge_update_dto(user, dto))
            except ResourceIDNotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

import textwrap

import msgspec
from fastapi import APIRouter, Depends, Query, Request

from usercrud.crud.formatters import MediaType, NegotiatedResponse, negotiated_media_type
from usercrud.crud.mapping import entity_to_user_dto
from usercrud.crud.route_templates.basic import LIST_USERS_ROUTE_NAME, BaseRouteTemplate
from usercrud.crud.schemas import PaginationHeader, UserDto
from usercrud.resource_manager.basic import IUserRepository
from usercrud.types import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    Page,
    UserEntity,
    clamp_page_number,
    clamp_page_size,
)


def query_int(raw: str | None, default: int) -> int:
    """查詢參數無法解析為整數時使用預設值"""
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def build_pagination_header(
    request: Request, page: Page[UserEntity]
) -> PaginationHeader:
    """產生 X-Pagination header 的內容，前後頁不存在時連結為 None"""
    list_url = request.url_for(LIST_USERS_ROUTE_NAME)

    def page_link(page_number: int) -> str:
        return str(
            list_url.include_query_params(
                pageNumber=page_number, pageSize=page.page_size
            )
        )

    return PaginationHeader(
        previous_link=page_link(page.page_number - 1)
        if page.has_previous
        else None,
        next_link=page_link(page.page_number + 1) if page.has_next else None,
        total_count=page.total_count,
        page_size=page.page_size,
        current_page=page.page_number,
        total_pages=page.total_pages,
    )


class ListRouteTemplate(BaseRouteTemplate):
    """分頁列出使用者的路由模板"""

    def __init__(self, default_page_size: int = DEFAULT_PAGE_SIZE, order: int = 100):
        super().__init__(order=order)
        self.default_page_size = clamp_page_size(default_page_size)

    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        @router.get(
            f"/{model_name}",
            name=LIST_USERS_ROUTE_NAME,
            summary=f"List {model_name}",
            tags=[model_name],
            description=textwrap.dedent(
                f"""
                List `{model_name}` records one page at a time, in insertion order.

                **Query Parameters:**
                - `pageNumber`: 1-based page number; values below 1 are treated as 1
                - `pageSize`: records per page, clamped into `[1, 20]`
                - Values that are not integers fall back to the defaults

                **Response Headers:**
                - `X-Pagination`: JSON with `previousLink`, `nextLink`,
                  `totalCount`, `pageSize`, `currentPage`, `totalPages`

                A page past the last one returns an empty array.""",
            ),
        )
        async def get_users(
            request: Request,
            page_number: str | None = Query(None, alias="pageNumber"),
            page_size: str | None = Query(None, alias="pageSize"),
            media_type: MediaType = Depends(negotiated_media_type),
        ):
            page = repository.get_page(
                clamp_page_number(query_int(page_number, DEFAULT_PAGE_NUMBER)),
                clamp_page_size(query_int(page_size, self.default_page_size)),
            )
            header = build_pagination_header(request, page)
            return NegotiatedResponse(
                [entity_to_user_dto(user) for user in page.items],
                media_type=media_type,
                headers={"X-Pagination": msgspec.json.encode(header).decode()},
                xml_root=f"ArrayOf{UserDto.__name__}",
            )

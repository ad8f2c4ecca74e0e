import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar
from uuid import UUID

import msgspec
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ValidationError

from usercrud.crud.schemas import field_errors
from usercrud.resource_manager.basic import IUserRepository
from usercrud.types import UserEntity

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=BaseModel)

GET_USER_ROUTE_NAME = "get_user_by_id"
LIST_USERS_ROUTE_NAME = "get_users"


class IRouteTemplate(ABC):
    """路由模板基類，定義如何為使用者資源生成單一 API 路由"""

    @abstractmethod
    def apply(
        self,
        model_name: str,
        repository: IUserRepository,
        router: APIRouter,
    ) -> None:
        """將路由模板應用到指定的 repository 和路由器

        Args:
            model_name: 資源集合名稱，例如 `users`
            repository: 使用者資源儲存
            router: FastAPI 路由器
        """

    @property
    @abstractmethod
    def order(self) -> int:
        """獲取路由模板的排序權重"""


class BaseRouteTemplate(IRouteTemplate):
    def __init__(self, order: int = 100):
        self._order = order

    @property
    def order(self) -> int:
        return self._order

    def __lt__(self, other: IRouteTemplate):
        return self.order < other.order

    def __le__(self, other: IRouteTemplate):
        return self.order <= other.order


def parse_user_id(raw: str) -> UUID | None:
    try:
        return UUID(raw)
    except ValueError:
        return None


def find_user_or_404(repository: IUserRepository, raw_id: str) -> UserEntity:
    """讀取路徑上的使用者；id 格式錯誤或不存在都回應 404"""
    user_id = parse_user_id(raw_id)
    user = None if user_id is None else repository.find_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=404,
            detail=f"User '{raw_id}' not found",
        )
    return user


async def read_json_body(request: Request, expected: type) -> Any:
    """讀取 JSON body；空白、null、格式錯誤或型別不符都回應 400"""
    body = await request.body()
    if not body.strip():
        raise HTTPException(status_code=400, detail="Request body is empty")
    try:
        payload = msgspec.json.decode(body)
    except (msgspec.DecodeError, UnicodeDecodeError) as e:
        raise HTTPException(
            status_code=400,
            detail=f"Malformed JSON body: {e}",
        )
    if not isinstance(payload, expected):
        raise HTTPException(
            status_code=400,
            detail=f"Request body must be a JSON {expected.__name__}",
        )
    return payload


def validate_dto(dto_type: type[D], payload: Any) -> D:
    """以 pydantic 驗證 payload；失敗時回應 422 與欄位錯誤對照表"""
    try:
        return dto_type.model_validate(payload)
    except ValidationError as e:
        errors = field_errors(e)
        logger.info("Rejected %s: %s", dto_type.__name__, errors)
        raise HTTPException(status_code=422, detail=errors)


def location_of(request: Request, user_id: UUID) -> str:
    return str(request.url_for(GET_USER_ROUTE_NAME, user_id=str(user_id)))


def model_to_request_body(
    model: type[BaseModel] | None = None,
    media_type: str = "application/json",
    schema: dict | None = None,
) -> dict:
    """產生 openapi_extra，讓手動讀取 body 的路由仍有 request schema"""
    if schema is None:
        schema = model.model_json_schema(by_alias=True)
    return {
        "requestBody": {
            "required": True,
            "content": {media_type: {"schema": schema}},
        },
    }

import datetime as dt
from uuid import UUID

import msgspec
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

LOGIN_ERROR_MESSAGE = "Login should contain only letters or digits"


def _check_login(value: str) -> str:
    if not all(c.isalpha() or c.isdecimal() for c in value):
        raise PydanticCustomError("login_not_alphanumeric", LOGIN_ERROR_MESSAGE)
    return value


class _RequestDto(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateUserDto(_RequestDto):
    """POST /users 的請求內容"""

    login: str = Field(..., min_length=1)
    first_name: str = "John"
    last_name: str = "Doe"

    @field_validator("login")
    @classmethod
    def login_is_alphanumeric(cls, value: str) -> str:
        return _check_login(value)


class UpdateUserDto(_RequestDto):
    """PUT /users/{id} 的請求內容，也是 PATCH 套用的投影"""

    login: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)

    @field_validator("login")
    @classmethod
    def login_is_alphanumeric(cls, value: str) -> str:
        return _check_login(value)


class UserDto(msgspec.Struct, kw_only=True, rename="camel"):
    id: UUID
    login: str
    first_name: str | None = None
    last_name: str | None = None
    full_name: str
    created_at: dt.datetime | None = None


class PaginationHeader(msgspec.Struct, kw_only=True, rename="camel"):
    previous_link: str | None
    next_link: str | None
    total_count: int
    page_size: int
    current_page: int
    total_pages: int


def to_field_name(loc: str) -> str:
    """將 camelCase 欄位名轉為錯誤訊息使用的 PascalCase"""
    return loc[:1].upper() + loc[1:]


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """將 pydantic ValidationError 整理為 {欄位: [訊息, ...]}"""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("",)
        errors.setdefault(to_field_name(str(loc[0])), []).append(err["msg"])
    return errors

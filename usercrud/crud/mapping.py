"""DTO 與 UserEntity 之間的轉換

每個方向一個純函式，欄位逐一列出，不依賴反射或設定檔。
"""

from typing import Any
from uuid import UUID

import msgspec

from usercrud.crud.schemas import CreateUserDto, UpdateUserDto, UserDto
from usercrud.types import UserEntity


def full_name_of(user: UserEntity) -> str:
    return " ".join(p for p in (user.last_name, user.first_name) if p)


def create_dto_to_entity(dto: CreateUserDto) -> UserEntity:
    return UserEntity(
        login=dto.login,
        first_name=dto.first_name,
        last_name=dto.last_name,
    )


def update_dto_to_entity(user_id: UUID, dto: UpdateUserDto) -> UserEntity:
    return UserEntity(
        id=user_id,
        login=dto.login,
        first_name=dto.first_name,
        last_name=dto.last_name,
    )


def entity_to_user_dto(user: UserEntity) -> UserDto:
    return UserDto(
        id=user.id,
        login=user.login,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=full_name_of(user),
        created_at=user.created_at,
    )


def entity_to_patch_projection(user: UserEntity) -> dict[str, Any]:
    """將 entity 投影為 UpdateUserDto 的 wire 格式，供 JSON Patch 套用"""
    return {
        "login": user.login,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def merge_update_dto(user: UserEntity, dto: UpdateUserDto) -> UserEntity:
    """將驗證過的投影寫回 entity，保留 id 與 created_at"""
    return msgspec.structs.replace(
        user,
        login=dto.login,
        first_name=dto.first_name,
        last_name=dto.last_name,
    )

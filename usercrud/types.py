import datetime as dt
from typing import Generic, TypeVar
from uuid import UUID

from msgspec import Struct

T = TypeVar("T")

MIN_PAGE_NUMBER = 1
DEFAULT_PAGE_NUMBER = 1
MIN_PAGE_SIZE = 1
# 單頁上限是協定的一部分，不是使用者偏好
MAX_PAGE_SIZE = 20
DEFAULT_PAGE_SIZE = 10


class UserEntity(Struct, kw_only=True):
    id: UUID | None = None
    login: str
    first_name: str | None = None
    last_name: str | None = None
    # 只在 insert 時由 store 設定
    created_at: dt.datetime | None = None


class Page(Struct, Generic[T], kw_only=True):
    items: list[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous: bool
    has_next: bool

    @classmethod
    def build(
        cls, items: list[T], page_number: int, page_size: int, total_count: int
    ) -> "Page[T]":
        """依照 total_count 計算分頁 metadata"""
        total_pages = -(-total_count // page_size)
        return cls(
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )


def clamp_page_number(page_number: int) -> int:
    return max(MIN_PAGE_NUMBER, page_number)


def clamp_page_size(page_size: int) -> int:
    return min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, page_size))

import datetime as dt
import logging
import threading
from collections.abc import Callable
from uuid import UUID, uuid4

import msgspec

from usercrud.resource_manager.basic import IUserRepository, ResourceIDNotFoundError
from usercrud.types import Page, UserEntity, clamp_page_number, clamp_page_size

logger = logging.getLogger(__name__)


def default_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class MemoryUserRepository(IUserRepository):
    """以 dict 保存使用者的記憶體儲存

    dict 的插入順序就是分頁的排序依據：update 不改變位置，
    update_or_insert 新增時接在最後。所有存取都在同一把鎖內完成。
    """

    def __init__(
        self,
        *,
        id_generator: Callable[[], UUID] | None = None,
        now: Callable[[], dt.datetime] | None = None,
    ):
        self._store: dict[UUID, UserEntity] = {}
        self._lock = threading.RLock()
        self.id_generator = uuid4 if id_generator is None else id_generator
        self.now = default_now if now is None else now

    def _new_id(self) -> UUID:
        user_id = self.id_generator()
        while user_id in self._store:
            logger.warning("Generated id %s collides, drawing again", user_id)
            user_id = self.id_generator()
        return user_id

    def _save(self, user: UserEntity) -> UserEntity:
        self._store[user.id] = user
        return msgspec.structs.replace(user)

    def find_by_id(self, user_id: UUID) -> UserEntity | None:
        with self._lock:
            user = self._store.get(user_id)
            if user is None:
                return None
            return msgspec.structs.replace(user)

    def insert(self, user: UserEntity) -> UserEntity:
        with self._lock:
            stored = msgspec.structs.replace(
                user, id=self._new_id(), created_at=self.now()
            )
            logger.debug("Insert user %s", stored.id)
            return self._save(stored)

    def _update_no_lock(self, user: UserEntity) -> UserEntity:
        prev = self._store[user.id]
        stored = msgspec.structs.replace(user, created_at=prev.created_at)
        logger.debug("Update user %s", stored.id)
        return self._save(stored)

    def update(self, user: UserEntity) -> UserEntity:
        with self._lock:
            if user.id not in self._store:
                raise ResourceIDNotFoundError(user.id)
            return self._update_no_lock(user)

    def update_or_insert(self, user: UserEntity) -> tuple[UserEntity, bool]:
        if user.id is None:
            return self.insert(user), True
        with self._lock:
            if user.id in self._store:
                return self._update_no_lock(user), False
            stored = msgspec.structs.replace(user, created_at=self.now())
            logger.debug("Insert user %s with given id", stored.id)
            return self._save(stored), True

    def delete(self, user_id: UUID) -> None:
        with self._lock:
            if self._store.pop(user_id, None) is not None:
                logger.debug("Delete user %s", user_id)

    def get_page(self, page_number: int, page_size: int) -> Page[UserEntity]:
        page_number = clamp_page_number(page_number)
        page_size = clamp_page_size(page_size)
        offset = (page_number - 1) * page_size
        with self._lock:
            total_count = len(self._store)
            items = [
                msgspec.structs.replace(user)
                for user in list(self._store.values())[offset : offset + page_size]
            ]
        return Page.build(items, page_number, page_size, total_count)

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

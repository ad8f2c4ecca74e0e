from abc import ABC, abstractmethod
from uuid import UUID

from usercrud.types import Page, UserEntity


class ResourceNotFoundError(Exception):
    pass


class ResourceIDNotFoundError(ResourceNotFoundError):
    def __init__(self, resource_id: UUID):
        super().__init__(f"Resource '{resource_id}' not found.")
        self.resource_id = resource_id


class IUserRepository(ABC):
    """使用者資源儲存的介面

    所有操作對型別正確的輸入都不會失敗；找不到資源時 `find_by_id` 回傳
    None，只有 `update` 會以 ResourceIDNotFoundError 表示前置條件不成立。
    回傳的 entity 都是複本，呼叫端修改後必須再呼叫 update 寫回。
    """

    @abstractmethod
    def find_by_id(self, user_id: UUID) -> UserEntity | None:
        """以 id 查詢使用者，不存在時回傳 None"""

    @abstractmethod
    def insert(self, user: UserEntity) -> UserEntity:
        """新增使用者

        忽略 `user.id`，由 store 產生新的唯一 id 並設定 `created_at`。

        Returns:
            UserEntity: 已儲存的使用者（包含新 id）
        """

    @abstractmethod
    def update(self, user: UserEntity) -> UserEntity:
        """更新既有使用者，保留 `created_at`

        Raises:
            ResourceIDNotFoundError: `user.id` 不存在
        """

    @abstractmethod
    def update_or_insert(self, user: UserEntity) -> tuple[UserEntity, bool]:
        """存在則更新，不存在則以呼叫端提供的 id 新增

        Returns:
            tuple[UserEntity, bool]: 已儲存的使用者，以及是否為新增
        """

    @abstractmethod
    def delete(self, user_id: UUID) -> None:
        """刪除使用者；不存在時不做任何事"""

    @abstractmethod
    def get_page(self, page_number: int, page_size: int) -> Page[UserEntity]:
        """依照插入順序取得一頁使用者"""

    @abstractmethod
    def count(self) -> int: ...

    def __len__(self) -> int:
        return self.count()

"""usercrud - 記憶體使用者資源的 CRUD API"""

from .app import create_app
from .config import Settings, get_settings
from .crud.core import UserCRUD, default_route_templates
from .resource_manager.basic import IUserRepository, ResourceIDNotFoundError
from .resource_manager.resource_store.simple import MemoryUserRepository
from .types import MAX_PAGE_SIZE, Page, UserEntity

__version__ = "0.1.0"
__all__ = [
    "create_app",
    "Settings",
    "get_settings",
    "UserCRUD",
    "default_route_templates",
    "IUserRepository",
    "ResourceIDNotFoundError",
    "MemoryUserRepository",
    "MAX_PAGE_SIZE",
    "Page",
    "UserEntity",
]

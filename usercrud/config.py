"""環境變數設定 (pydantic-settings)

所有設定都可用 `USERCRUD_` 前綴的環境變數或 `.env` 覆寫；
`get_settings()` 以 lru_cache 確保每個 process 只有一份。
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from usercrud.types import DEFAULT_PAGE_SIZE, clamp_page_size


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="USERCRUD_", env_file=".env", case_sensitive=False
    )

    title: str = "Users API"

    # Server
    host: str = "127.0.0.1"
    port: int = 5000

    # API
    api_prefix: str = ""
    default_page_size: int = DEFAULT_PAGE_SIZE

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("default_page_size")
    @classmethod
    def clamp_default_page_size(cls, v: int) -> int:
        return clamp_page_size(v)


@lru_cache
def get_settings() -> Settings:
    return Settings()

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Blogsite"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False

    database_url: str = "sqlite:///./blogsite.db"

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    # None keeps session tokens valid until the secret rotates.
    access_token_expire_minutes: int | None = None
    session_cookie_name: str = "token"
    cookie_secure: bool = False

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])
    upload_dir: str = "data/uploads"
    auto_create_tables: bool = True
    enforce_blog_ownership: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "vaultsync"
    app_env: str = "development"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./vaultsync.sqlite3"

    # Blob store root, one directory per cipher
    attachments_folder: str = "data/attachments"

    # Public base URL for attachment links. Empty means "use the request host".
    domain: str | None = None

    # Single-transaction variants of the cascade delete and the bulk import
    atomic_cascade_delete: bool = False
    atomic_import: bool = False

    upload_policy: Literal["best_effort", "all_or_nothing"] = "best_effort"

    # JWT
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

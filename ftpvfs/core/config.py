from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ftpvfs.core.logging import SUPPORTED_FORMATS

SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FTPVFS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "FtpVFS"
    environment: str = "production"
    log_level: str = "INFO"
    log_format: str = "json"

    vfs_root: Path = Field(default=Path("/sdcard"))
    path_capacity: PositiveInt = 256
    max_sessions: PositiveInt = 16
    default_dir_mode: int = 0o777

    @field_validator("vfs_root", mode="before")
    @classmethod
    def _normalize_root(cls, value: str | Path) -> Path:
        raw = str(value)
        if "~" in raw:
            raise ValueError("Home expansion syntax is not allowed in paths")
        if "$" in raw:
            raise ValueError("Environment variable syntax is not allowed in paths")
        path = Path(raw)
        if not path.is_absolute():
            raise ValueError("vfs_root must be absolute")
        return path

    @model_validator(mode="after")
    def _validate_runtime_constraints(self) -> "Settings":
        normalized_level = self.log_level.strip().upper()
        if normalized_level not in SUPPORTED_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(SUPPORTED_LOG_LEVELS)}")
        self.log_level = normalized_level

        normalized_format = self.log_format.strip().lower()
        if normalized_format not in SUPPORTED_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(SUPPORTED_FORMATS)}")
        self.log_format = normalized_format

        if len(self.root_prefix.encode("utf-8")) + 1 >= self.path_capacity:
            raise ValueError("path_capacity must leave room for paths below vfs_root")

        if not 0 <= self.default_dir_mode <= 0o7777:
            raise ValueError("default_dir_mode must be between 0 and 0o7777")

        return self

    @property
    def root_prefix(self) -> str:
        raw = self.vfs_root.as_posix()
        return raw if raw.endswith("/") else raw + "/"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

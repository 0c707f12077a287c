from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from result import Result

from fireline.common import AppInfo, LoggingConfig
from fireline.config import ConfigError, ProjectConfig, validate_project_config
from fireline.constants import DEFAULT_IDENTITY_URL, DEFAULT_STORAGE_URL


class ProjectSettings(BaseModel):
    api_key: str = ""
    auth_domain: str = ""
    database_url: str = ""
    storage_bucket: str = ""


class HttpSettings(BaseModel):
    timeout_seconds: float = Field(default=5.0, gt=0)
    identity_url: str = DEFAULT_IDENTITY_URL
    storage_url: str = DEFAULT_STORAGE_URL


class RunnerSettings(BaseModel):
    max_workers: int = Field(default=16, ge=1)


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    project: ProjectSettings = ProjectSettings()
    http: HttpSettings = HttpSettings()
    runner: RunnerSettings = RunnerSettings()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="FIRELINE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        nested_model_default_partial_update=True,
    )

    def to_project_config(self) -> Result[ProjectConfig, ConfigError]:
        return validate_project_config(self.project.model_dump())


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# Private singleton instance
_settings: Settings | None = None


__all__ = [
    "HttpSettings",
    "ProjectSettings",
    "RunnerSettings",
    "Settings",
    "get_settings",
]

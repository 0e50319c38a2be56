"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from templatr.modules.templates import TemplateOption


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class TemplateSettings(BaseModel):
    directory: Path = Path("site")
    name: str = "template.htm"
    remove_white_space: bool = False
    merge_scripts: bool = True
    verbose: bool = False
    location_origin: str = "http://domain"
    encoding: str = "utf-8"

    @property
    def options(self) -> TemplateOption:
        options = TemplateOption.NONE
        if self.remove_white_space:
            options |= TemplateOption.REMOVE_WHITE_SPACE
        if self.merge_scripts:
            options |= TemplateOption.MERGE_SCRIPTS
        if self.verbose:
            options |= TemplateOption.VERBOSE
        return options


class LoaderSettings(BaseModel):
    remote_timeout: float = Field(default=30.0, gt=0)


class MiddlewareSettings(BaseModel):
    ready_timeout: float = Field(default=30.0, gt=0)


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPLATR_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Templatr"

    server: ServerSettings = ServerSettings()
    template: TemplateSettings = TemplateSettings()
    loader: LoaderSettings = LoaderSettings()
    middleware: MiddlewareSettings = MiddlewareSettings()

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def template_path(self) -> Path:
        return self.template.directory / self.template.name


@lru_cache()
def get_settings() -> Settings:
    return Settings()

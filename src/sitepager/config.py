"""Site configuration backed by pydantic-settings."""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sitepager.exceptions import ConfigLoadError

CONFIG_FILENAME = ".sitepager.toml"


def _deep_merge(destination: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), dict(value))
        else:
            destination[key] = value
    return destination


class PathsSettings(BaseModel):
    """Path configuration.

    All paths are relative to the 'site_root' unless absolute.
    site_root defaults to current working directory.
    """

    site_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the site (defaults to current working directory)",
    )
    pages_dir: Path = Field(default=Path("pages"), description="Content pages directory")
    templates_dir: Path = Field(default=Path("templates"), description="Component templates directory")
    output_dir: Path = Field(default=Path("dist"), description="Build output directory")

    @property
    def abs_pages_dir(self) -> Path:
        return self._resolve(self.pages_dir)

    @property
    def abs_templates_dir(self) -> Path:
        return self._resolve(self.templates_dir)

    @property
    def abs_output_dir(self) -> Path:
        return self._resolve(self.output_dir)

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.site_root / path


class PaginationSettings(BaseModel):
    """Defaults applied to every paginated aggregation."""

    segment: str = Field(default="page", description="URL segment for pages 2..N")
    template: str = Field(default="pagination", description="Pagination-control template id")
    max_visible: int = Field(default=5, ge=1, description="Maximum page links shown by the control")
    aria_label: str = Field(default="Pagination", description="aria-label of the control")
    ellipsis: str = Field(default="...", description="Gap marker between page links")
    index_filename: str = Field(default="index.html", description="Directory index filename")


class SitepagerConfig(BaseSettings):
    """Root configuration.

    Supports environment variable overrides with the pattern:
    SITEPAGER_SECTION__KEY (e.g., SITEPAGER_PAGINATION__SEGMENT)
    """

    paths: PathsSettings = Field(default_factory=PathsSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="SITEPAGER_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls, site_root: Path | None = None) -> "SitepagerConfig":
        """Loads configuration from .sitepager.toml and environment variables.

        Priority (highest to lowest):
        1. Environment variables (SITEPAGER_SECTION__KEY)
        2. Config file (.sitepager.toml)
        3. Defaults
        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigLoadError(str(config_file), str(exc)) from exc

        env_settings = cls().model_dump(exclude_unset=True)
        merged_config = _deep_merge(file_settings, env_settings)
        merged_config.setdefault("paths", {})["site_root"] = root_path

        return cls.model_validate(merged_config)

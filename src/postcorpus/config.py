"""Pipeline configuration.

Values come from, in priority order:

1. Environment variables (``POSTCORPUS_<FIELD>``)
2. ``.postcorpus.toml`` in the site root
3. Defaults
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postcorpus.exceptions import ConfigError

CONFIG_FILENAME = ".postcorpus.toml"
DEFAULT_SENTINEL = "<|RELATED_DOC_SEP|>"
DEFAULT_CONTENT_DIR = Path("content/posts")
DEFAULT_OUTPUT_PATH = Path(".postcorpus/corpus.json")

SentinelMode = Literal["literal", "line"]


class CorpusSettings(BaseSettings):
    """Settings for one ingestion run.

    Relative paths are resolved against ``site_root``.
    """

    site_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the site (defaults to current working directory)",
    )
    content_dir: Path = Field(default=DEFAULT_CONTENT_DIR, description="Directory holding the posts")
    output_path: Path = Field(default=DEFAULT_OUTPUT_PATH, description="Where the serialized corpus is written")
    extensions: tuple[str, ...] = Field(default=(".md", ".mdx"), description="Source file suffixes")

    sentinel: str = Field(default=DEFAULT_SENTINEL, description="Literal separator between posts in one file")
    sentinel_mode: SentinelMode = Field(
        default="literal",
        description="'literal' splits on every occurrence, 'line' only where the sentinel is alone on a line",
    )

    related_limit: int = Field(default=3, ge=0, description="Maximum related posts per post")
    words_per_minute: int = Field(default=200, gt=0, description="Reading speed used for reading time")
    max_workers: int = Field(default=1, ge=1, description="Threads used to read and parse source files")

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="POSTCORPUS_",
    )

    @field_validator("sentinel")
    @classmethod
    def _sentinel_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "sentinel must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value)

    @property
    def abs_content_dir(self) -> Path:
        return self._resolve(self.content_dir)

    @property
    def abs_output_path(self) -> Path:
        return self._resolve(self.output_path)

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.site_root / path

    @classmethod
    def load(cls, site_root: Path | None = None) -> CorpusSettings:
        """Load settings from ``.postcorpus.toml`` and environment variables.

        Raises:
            ConfigError: If the file is not valid TOML or holds invalid values.

        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {config_file}: {exc}"
                raise ConfigError(msg) from exc

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged = {**file_settings, **env_settings, "site_root": root_path}
            return cls.model_validate(merged)
        except ValidationError as exc:
            msg = f"Invalid postcorpus configuration: {exc}"
            raise ConfigError(msg) from exc

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator


class TaggingSettings(BaseModel):
    id3_version: int = 4
    keep_existing: bool = False
    cover_mime: str = "image/jpeg"
    cover_description: str = "Cover"

    @field_validator("id3_version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value not in (3, 4):
            raise ValueError("id3_version must be 3 or 4")
        return value


class MetadataSettings(BaseModel):
    temp_dir: Optional[Path] = None
    chapters_suffix: str = "-chapters.txt"
    metadata_suffix: str = "-ffmetadata.txt"

    @field_validator("temp_dir", mode="before")
    @classmethod
    def _expand_temp_dir(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser().resolve()


class Settings(BaseModel):
    tagging: TaggingSettings = TaggingSettings()
    metadata: MetadataSettings = MetadataSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file {explicit_path} does not exist.")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)

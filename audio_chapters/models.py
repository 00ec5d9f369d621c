from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .timecode import format_millis


class Chapter(BaseModel):
    title: str = ""
    # Human time code such as "00:05:00.500"; validated only when parsed.
    start: str

    @field_validator("start", mode="before")
    @classmethod
    def _sexagesimal_start(cls, value: object) -> object:
        # YAML 1.1 turns unquoted 1:02:03 or 00:05:00.500 into base-60 numbers.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_millis(round(value * 1000))
        return value


class TrackInfo(BaseModel):
    title: str = ""
    album: str = ""
    artist: str = ""
    genre: str = ""
    year: str = ""
    date: Optional[dt.date] = None
    track: str = ""
    comment: str = ""
    description: str = ""
    language: str = ""
    copyright: str = ""
    cover_jpeg: str = Field(default="", alias="coverJPEG")
    chapters: List[Chapter] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("year", "track", mode="before")
    @classmethod
    def _stringify_number(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _empty_date(cls, value: object) -> object:
        if value == "":
            return None
        return value

    @classmethod
    def load(cls, path: Path) -> "TrackInfo":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


@dataclass(frozen=True, slots=True)
class ChapterInterval:
    element_id: str
    start_ms: int
    end_ms: int
    title: str


from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence, Type

from mutagen.id3 import (
    APIC,
    COMM,
    ID3,
    TALB,
    TCON,
    TCOP,
    TDRC,
    TIT2,
    TLAN,
    TPE1,
    TRCK,
    BinaryFrame,
    Encoding,
    ID3NoHeaderError,
    ID3Tags,
    PictureType,
)

from . import frame_ids
from .config import TaggingSettings
from .frames import build_chapter_frames
from .models import Chapter, TrackInfo
from .probe import probe_duration_millis

logger = logging.getLogger(__name__)


class TagContainer(Protocol):
    def add_record(self, frame_id: str, body: bytes) -> None: ...

    def save(self) -> None: ...


class RawRecordFrame(BinaryFrame):
    """A CHAP or CTOC frame whose body is written exactly as it was encoded.

    Both bodies start with their NUL-terminated element id, so the HashKey
    matches mutagen's own ``CHAP:<id>`` / ``CTOC:<id>`` keys and ``getall`` /
    ``delall`` treat these frames like parsed ones.
    """

    @property
    def HashKey(self) -> str:
        element_id = self.data.split(b"\x00", 1)[0].decode("latin-1")
        return f"{self.FrameID}:{element_id}"

    @property
    def sub_frames(self) -> ID3Tags:
        # Nested frames stay inside data; update_to_v23 still walks this.
        return ID3Tags()


# mutagen writes the class name as the frame id.
RAW_RECORD_TYPES: Dict[str, Type[RawRecordFrame]] = {
    frame_id: type(frame_id, (RawRecordFrame,), {})
    for frame_id in (frame_ids.CHAP, frame_ids.CTOC)
}


class ID3TagContainer:
    """ID3v2 tag of one file that accepts pre-encoded CHAP and CTOC frame bodies."""

    def __init__(self, path: Path, tags: ID3, version: int = 4) -> None:
        self.path = path
        self.tags = tags
        self.version = version

    @classmethod
    def open(cls, path: Path, *, keep_existing: bool = False, version: int = 4) -> "ID3TagContainer":
        # Without keep_existing the file's current tag is replaced wholesale on save.
        if not keep_existing:
            return cls(path, ID3(), version=version)
        try:
            tags = ID3(path)
        except ID3NoHeaderError:
            tags = ID3()
        tags.delall(frame_ids.CHAP)
        tags.delall(frame_ids.CTOC)
        return cls(path, tags, version=version)

    def add_record(self, frame_id: str, body: bytes) -> None:
        record_type = RAW_RECORD_TYPES.get(frame_id)
        if record_type is None:
            raise ValueError(f"Unsupported raw frame {frame_id!r}")
        self.tags.add(record_type(data=bytes(body)))

    def set_text(self, frame_cls, value: str, desc: Optional[str] = None, lang: str = "XXX") -> None:
        if not value:
            return
        if desc is None:
            self.tags.setall(frame_cls.__name__, [frame_cls(encoding=Encoding.UTF8, text=value)])
            return
        frame = frame_cls(encoding=Encoding.UTF8, lang=lang, desc=desc, text=value)
        self.tags.setall(frame.HashKey, [frame])

    def add_cover(self, data: bytes, mime: str, description: str) -> None:
        self.tags.add(
            APIC(
                encoding=Encoding.LATIN1,
                mime=mime,
                type=PictureType.COVER_FRONT,
                desc=description,
                data=data,
            )
        )

    def save(self) -> None:
        if self.version == 3:
            self.tags.update_to_v23()
        self.tags.save(self.path, v2_version=self.version)
        logger.debug("Saved ID3v2.%d tag to %s", self.version, self.path)


def add_chapter_frames(
    container: TagContainer, total_ms: Optional[int], chapters: Sequence[Chapter]
) -> int:
    """Add one CHAP frame per chapter and a closing CTOC frame to container.

    All frames are encoded before the first one is added, so a bad chapter
    leaves the container untouched. Returns the number of frames added.
    """
    frames = build_chapter_frames(chapters, total_ms)
    for frame_id, body in frames:
        container.add_record(frame_id, body)
    return len(frames)


class TagWriter:
    """Writes track fields, cover art and chapters into a file's ID3v2 tag."""

    def __init__(self, settings: Optional[TaggingSettings] = None) -> None:
        self.settings = settings or TaggingSettings()

    def apply(self, path: Path, track: TrackInfo) -> None:
        total_ms = probe_duration_millis(path)
        container = ID3TagContainer.open(
            path,
            keep_existing=self.settings.keep_existing,
            version=self.settings.id3_version,
        )
        self._apply_fields(container, track)
        if track.cover_jpeg:
            self._apply_cover(container, Path(track.cover_jpeg))
        added = add_chapter_frames(container, total_ms, track.chapters)
        logger.debug("Added %d chapter frames to %s", added, path)
        container.save()

    def _apply_fields(self, container: ID3TagContainer, track: TrackInfo) -> None:
        container.set_text(TIT2, track.title)
        container.set_text(TALB, track.album)
        container.set_text(TPE1, track.artist)
        container.set_text(TCON, track.genre)
        year = track.year or (track.date.isoformat() if track.date else "")
        container.set_text(TDRC, year)
        container.set_text(TRCK, track.track)
        container.set_text(TLAN, track.language)
        container.set_text(TCOP, track.copyright)
        lang = self._comment_lang(track.language)
        container.set_text(COMM, track.comment, desc="", lang=lang)
        container.set_text(COMM, track.description, desc="Description", lang=lang)

    def _apply_cover(self, container: ID3TagContainer, cover: Path) -> None:
        data = cover.read_bytes()
        container.add_cover(data, self.settings.cover_mime, self.settings.cover_description)

    @staticmethod
    def _comment_lang(language: str) -> str:
        code = language.strip().lower()
        if len(code) == 3 and code.isalpha():
            return code
        return "XXX"

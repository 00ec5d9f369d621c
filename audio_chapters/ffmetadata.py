"""FFmpeg ``;FFMETADATA1`` text rendering for chapters and track fields.

The output is meant for e.g.::

    ffmpeg -i output.m4a -i metadata.txt -map_metadata 1 -codec copy final_output.m4a
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import MetadataSettings
from .fs_utils import write_temp_text
from .intervals import build_intervals
from .models import Chapter, TrackInfo

logger = logging.getLogger(__name__)

HEADER = ";FFMETADATA1\n"
TIMEBASE = "1/1000"


def sanitize_value(value: str) -> str:
    # A value must never span lines, otherwise it could inject extra keys.
    return value.replace("\n", "").replace("\r", "").strip()


def _chapter_blocks(total_ms: Optional[int], chapters: Sequence[Chapter]) -> str:
    return "".join(
        f"\n[CHAPTER]\nTIMEBASE={TIMEBASE}\nSTART={interval.start_ms}\n"
        f"END={interval.end_ms}\ntitle={interval.title}\n"
        for interval in build_intervals(chapters, total_ms)
    )


def render_chapters(total_ms: Optional[int], chapters: Sequence[Chapter]) -> str:
    """Render chapters only; an empty chapter list renders as an empty string."""
    if not chapters:
        return ""
    return HEADER + _chapter_blocks(total_ms, chapters)


def _copyright(track: TrackInfo) -> str:
    if sanitize_value(track.copyright):
        return track.copyright
    year = f"{track.date.year:04d}" if track.date else sanitize_value(track.year)
    if not year:
        return ""
    return f"Copyright {year} {track.artist}"


def _track_fields(track: TrackInfo) -> List[Tuple[str, str]]:
    fields = [
        ("title", track.title),
        ("album", track.album),
        ("artist", track.artist),
        ("genre", track.genre),
        ("track", track.track),
        ("comment", track.comment),
        ("language", track.language),
        ("description", track.description),
        ("copyright", _copyright(track)),
    ]
    if track.date:
        fields.append(("date", track.date.strftime("%Y-%m-%d")))
    return fields


def render_metadata(total_ms: Optional[int], track: TrackInfo) -> str:
    """Render track fields followed by its chapters.

    Fields come out in a fixed order and are skipped when blank. The chapter
    blocks are computed first so a bad chapter aborts without partial output.
    """
    chapters = _chapter_blocks(total_ms, track.chapters) if track.chapters else ""
    lines = [HEADER]
    for key, value in _track_fields(track):
        clean = sanitize_value(value)
        if clean:
            lines.append(f"{key}={clean}\n")
    lines.append(chapters)
    return "".join(lines)


def write_chapters_file(
    total_ms: Optional[int],
    chapters: Sequence[Chapter],
    settings: Optional[MetadataSettings] = None,
) -> Path:
    settings = settings or MetadataSettings()
    content = render_chapters(total_ms, chapters)
    path = write_temp_text(content, suffix=settings.chapters_suffix, directory=settings.temp_dir)
    logger.debug("Wrote %d chapters to %s", len(chapters), path)
    return path


def write_metadata_file(
    total_ms: Optional[int],
    track: TrackInfo,
    settings: Optional[MetadataSettings] = None,
) -> Path:
    settings = settings or MetadataSettings()
    content = render_metadata(total_ms, track)
    path = write_temp_text(content, suffix=settings.metadata_suffix, directory=settings.temp_dir)
    logger.debug("Wrote FFmetadata with %d chapters to %s", len(track.chapters), path)
    return path

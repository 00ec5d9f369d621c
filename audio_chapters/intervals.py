from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import ZeroDuration
from .models import Chapter, ChapterInterval
from .timecode import parse_time_code


def build_intervals(chapters: Sequence[Chapter], total_ms: Optional[int]) -> List[ChapterInterval]:
    """Turn ordered chapters into [start, end) millisecond intervals.

    Each chapter ends where the next one starts; the last one ends at total_ms.
    Element ids are the 1-based chapter positions as decimal strings. Start
    times are not checked for ordering, so out-of-order input yields an
    interval whose end precedes its start.
    """
    if not chapters:
        return []
    if not total_ms or total_ms < 0:
        raise ZeroDuration()
    # Parse everything before building anything: one bad time code aborts the whole list.
    starts = [parse_time_code(chapter.start) for chapter in chapters]
    ends = starts[1:] + [total_ms]
    return [
        ChapterInterval(
            element_id=str(index),
            start_ms=start,
            end_ms=end,
            title=chapter.title,
        )
        for index, (chapter, start, end) in enumerate(zip(chapters, starts, ends), start=1)
    ]

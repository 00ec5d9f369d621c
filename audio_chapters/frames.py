from __future__ import annotations

import logging
import struct
from typing import List, Optional, Sequence, Tuple

from .frame_ids import CHAP, CTOC, TIT2
from .intervals import build_intervals
from .models import Chapter, ChapterInterval
from .text_encoding import decode_text_frame, encode_text_frame

logger = logging.getLogger(__name__)

# Byte offsets are not tracked; 0xFFFFFFFF marks them as unspecified.
OFFSET_UNSPECIFIED = 0xFFFFFFFF
TOC_ELEMENT_ID = "toc"
TOC_FLAGS = b"\x01\x00"
MAX_TOC_ENTRIES = 0xFF

_TIMES = struct.Struct(">IIII")
_SUB_FRAME_HEADER = struct.Struct(">4sIH")


def _terminated(text: str) -> bytes:
    return text.encode("ascii") + b"\x00"


def _read_terminated(body: bytes, offset: int) -> Tuple[str, int]:
    end = body.index(b"\x00", offset)
    return body[offset:end].decode("ascii"), end + 1


def encode_chapter_frame(interval: ChapterInterval) -> bytes:
    """Serialize one interval as a CHAP frame body.

    Layout: element id (NUL terminated), start ms, end ms, start offset, end
    offset (all big-endian uint32), then an embedded TIT2 sub-frame holding the
    title: frame id, payload length (big-endian uint32), two zero flag bytes
    and the UTF-16 payload.
    """
    title = encode_text_frame(interval.title)
    return b"".join(
        (
            _terminated(interval.element_id),
            _TIMES.pack(interval.start_ms, interval.end_ms, OFFSET_UNSPECIFIED, OFFSET_UNSPECIFIED),
            _SUB_FRAME_HEADER.pack(TIT2.encode("ascii"), len(title), 0),
            title,
        )
    )


def decode_chapter_frame(body: bytes) -> ChapterInterval:
    element_id, offset = _read_terminated(body, 0)
    start_ms, end_ms, _start_offset, _end_offset = _TIMES.unpack_from(body, offset)
    offset += _TIMES.size
    title = ""
    if offset < len(body):
        frame_id, size, _flags = _SUB_FRAME_HEADER.unpack_from(body, offset)
        offset += _SUB_FRAME_HEADER.size
        if frame_id != TIT2.encode("ascii"):
            raise ValueError(f"unexpected CHAP sub-frame {frame_id!r}")
        title = decode_text_frame(body[offset : offset + size])
    return ChapterInterval(element_id=element_id, start_ms=start_ms, end_ms=end_ms, title=title)


def encode_toc_frame(element_ids: Sequence[str]) -> bytes:
    """Serialize the top-level, ordered CTOC frame body listing element_ids."""
    if len(element_ids) > MAX_TOC_ENTRIES:
        raise ValueError(
            f"table of contents holds at most {MAX_TOC_ENTRIES} entries, got {len(element_ids)}"
        )
    parts = [_terminated(TOC_ELEMENT_ID), TOC_FLAGS, bytes((len(element_ids),))]
    parts.extend(_terminated(element_id) for element_id in element_ids)
    return b"".join(parts)


def decode_toc_frame(body: bytes) -> List[str]:
    element_id, offset = _read_terminated(body, 0)
    if element_id != TOC_ELEMENT_ID:
        raise ValueError(f"unexpected CTOC element id {element_id!r}")
    offset += len(TOC_FLAGS)
    count = body[offset]
    offset += 1
    children: List[str] = []
    for _ in range(count):
        child, offset = _read_terminated(body, offset)
        children.append(child)
    return children


def build_chapter_frames(
    chapters: Sequence[Chapter], total_ms: Optional[int]
) -> List[Tuple[str, bytes]]:
    """Return (frame id, body) pairs: one CHAP per chapter followed by the CTOC.

    Nothing is returned for an empty chapter list. Any failure raises before a
    single frame is produced.
    """
    intervals = build_intervals(chapters, total_ms)
    if not intervals:
        return []
    frames = [(CHAP, encode_chapter_frame(interval)) for interval in intervals]
    frames.append((CTOC, encode_toc_frame([interval.element_id for interval in intervals])))
    logger.debug("Encoded %d chapter frames", len(intervals))
    return frames

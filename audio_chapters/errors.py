from __future__ import annotations


class ChapterError(Exception):
    """Base class for failures while translating chapters into frames or text."""


class MalformedTimeCode(ChapterError, ValueError):
    """Raised when a chapter start matches none of the accepted time code formats."""

    def __init__(self, text: str) -> None:
        super().__init__(
            f"bad chapter start time {text!r} (expected HH:MM:SS.mmm, HH:MM:SS.m or HH:MM:SS)"
        )
        self.text = text


class ZeroDuration(ChapterError, ValueError):
    """Raised when chapters are supplied but the total duration is zero."""

    def __init__(self) -> None:
        super().__init__("duration can not be zero")


class DurationProbeError(Exception):
    """Raised when the playing time of a media file cannot be determined."""

from __future__ import annotations

import logging
from pathlib import Path

import mutagen
from mutagen import MutagenError

from .errors import DurationProbeError

logger = logging.getLogger(__name__)


def probe_duration_millis(path: Path) -> int:
    """Return the playing time of an audio file in whole milliseconds."""
    try:
        audio = mutagen.File(path)
    except (MutagenError, OSError) as exc:
        raise DurationProbeError(f"Could not read {path}: {exc}") from exc
    if audio is None or getattr(audio, "info", None) is None:
        raise DurationProbeError(f"Unrecognised audio format: {path}")
    millis = int(audio.info.length * 1000)
    logger.debug("Probed %s: %d ms", path, millis)
    return millis

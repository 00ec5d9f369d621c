from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .config import Settings, load_settings
from .errors import ChapterError, DurationProbeError
from .ffmetadata import render_chapters, render_metadata, write_chapters_file, write_metadata_file
from .intervals import build_intervals
from .models import TrackInfo
from .probe import probe_duration_millis
from .tagging import TagWriter
from .timecode import format_millis

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT, [Path.cwd()]))
    root_logger.addHandler(handler)
    logging.getLogger("mutagen").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-chapters",
        description="Embed chapter markers in audio files or export them for ffmpeg",
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    tag_parser = subparsers.add_parser(
        "tag", help="Write track fields, cover and chapters into the file's ID3v2 tag"
    )
    tag_parser.add_argument("audio", type=Path, help="Audio file to tag (modified in place)")
    tag_parser.add_argument(
        "--track", type=Path, required=True, help="Track description (YAML or JSON)"
    )

    for name, help_text in (
        ("chapters", "Print the computed chapter intervals"),
        ("ffmetadata", "Render an ffmpeg ;FFMETADATA1 file"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--track", type=Path, required=True, help="Track description (YAML or JSON)"
        )
        duration = sub.add_mutually_exclusive_group(required=True)
        duration.add_argument("--duration-ms", type=int, help="Total playing time in milliseconds")
        duration.add_argument(
            "--duration-from", type=Path, help="Read the total playing time from this audio file"
        )

    ffmeta_parser = subparsers.choices["ffmetadata"]
    ffmeta_parser.add_argument(
        "--chapters-only",
        action="store_true",
        help="Only emit chapter blocks, no track fields",
    )
    ffmeta_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the metadata instead of writing a temporary file",
    )
    return parser


def _duration(args: argparse.Namespace) -> int:
    if args.duration_from is not None:
        return probe_duration_millis(args.duration_from)
    return args.duration_ms


def _run_tag(args: argparse.Namespace, settings: Settings) -> None:
    track = TrackInfo.load(args.track)
    TagWriter(settings.tagging).apply(args.audio, track)
    logger.info("Tagged %s with %d chapters", args.audio, len(track.chapters))


def _run_chapters(args: argparse.Namespace) -> None:
    track = TrackInfo.load(args.track)
    for interval in build_intervals(track.chapters, _duration(args)):
        print(
            f"{interval.element_id:>3}  {format_millis(interval.start_ms)}"
            f"  {format_millis(interval.end_ms)}  {interval.title}"
        )


def _run_ffmetadata(args: argparse.Namespace, settings: Settings) -> None:
    track = TrackInfo.load(args.track)
    total_ms = _duration(args)
    if args.stdout:
        if args.chapters_only:
            text = render_chapters(total_ms, track.chapters)
        else:
            text = render_metadata(total_ms, track)
        sys.stdout.write(text)
        return
    if args.chapters_only:
        path = write_chapters_file(total_ms, track.chapters, settings.metadata)
    else:
        path = write_metadata_file(total_ms, track, settings.metadata)
    print(path)


def inner_main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        settings = load_settings(args.config)
        match args.command:
            case "tag":
                _run_tag(args, settings)
            case "chapters":
                _run_chapters(args)
            case "ffmetadata":
                _run_ffmetadata(args, settings)
    except (ChapterError, DurationProbeError, ValidationError, yaml.YAMLError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


def main() -> None:
    sys.exit(inner_main())


if __name__ == "__main__":
    main()

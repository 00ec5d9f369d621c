import struct
import unittest

from audio_chapters.errors import MalformedTimeCode, ZeroDuration
from audio_chapters.frames import (
    build_chapter_frames,
    decode_chapter_frame,
    decode_toc_frame,
    encode_chapter_frame,
    encode_toc_frame,
)
from audio_chapters.models import Chapter, ChapterInterval


def _utf16(text: str) -> bytes:
    return b"\x01\xff\xfe" + text.encode("utf-16-le")


class TestChapterFrame(unittest.TestCase):
    def test_layout(self) -> None:
        body = encode_chapter_frame(ChapterInterval("1", 0, 10_000, "Chapter 1"))
        title = _utf16("Chapter 1")
        expected = (
            b"1\x00"
            + b"\x00\x00\x00\x00"
            + b"\x00\x00\x27\x10"
            + b"\xff\xff\xff\xff"
            + b"\xff\xff\xff\xff"
            + b"TIT2"
            + struct.pack(">I", len(title))
            + b"\x00\x00"
            + title
        )
        self.assertEqual(body, expected)
        self.assertEqual(len(title), 21)

    def test_multi_digit_element_id_and_large_times(self) -> None:
        body = encode_chapter_frame(ChapterInterval("12", 3_600_000, 86_399_999, ""))
        self.assertTrue(body.startswith(b"12\x00\x00\x36\xee\x80\x05\x26\x5b\xff"))
        self.assertTrue(body.endswith(b"TIT2\x00\x00\x00\x03\x00\x00\x01\xff\xfe"))

    def test_times_beyond_32_bits_are_rejected(self) -> None:
        with self.assertRaises(struct.error):
            encode_chapter_frame(ChapterInterval("1", 0, 2**32, "Too long"))

    def test_decode_reads_back_interval(self) -> None:
        interval = ChapterInterval("7", 1_500, 9_000, "Épilogue")
        self.assertEqual(decode_chapter_frame(encode_chapter_frame(interval)), interval)


class TestTocFrame(unittest.TestCase):
    def test_layout(self) -> None:
        self.assertEqual(
            encode_toc_frame(["1", "2", "3"]),
            b"toc\x00" + b"\x01\x00" + b"\x03" + b"1\x002\x003\x00",
        )

    def test_decode_returns_ids_in_order(self) -> None:
        ids = [str(n) for n in range(1, 40)]
        self.assertEqual(decode_toc_frame(encode_toc_frame(ids)), ids)

    def test_entry_count_must_fit_one_byte(self) -> None:
        self.assertEqual(encode_toc_frame([str(n) for n in range(255)])[6], 255)
        with self.assertRaises(ValueError):
            encode_toc_frame([str(n) for n in range(256)])

    def test_decode_rejects_foreign_element_id(self) -> None:
        with self.assertRaises(ValueError):
            decode_toc_frame(b"root\x00\x01\x00\x00")


class TestBuildChapterFrames(unittest.TestCase):
    def setUp(self) -> None:
        self.chapters = [
            Chapter(title="Chapter 1", start="00:00:00.000"),
            Chapter(title="Chapter 2", start="00:00:10"),
            Chapter(title="Chapter 3", start="00:00:20.5"),
        ]

    def test_one_chap_per_chapter_then_ctoc(self) -> None:
        frames = build_chapter_frames(self.chapters, 30_000)
        self.assertEqual([frame_id for frame_id, _ in frames], ["CHAP", "CHAP", "CHAP", "CTOC"])
        decoded = [decode_chapter_frame(body) for _, body in frames[:-1]]
        self.assertEqual(
            [(i.element_id, i.start_ms, i.end_ms) for i in decoded],
            [("1", 0, 10_000), ("2", 10_000, 20_500), ("3", 20_500, 30_000)],
        )
        self.assertEqual(decode_toc_frame(frames[-1][1]), [i.element_id for i in decoded])

    def test_no_frames_without_chapters(self) -> None:
        self.assertEqual(build_chapter_frames([], 0), [])
        self.assertEqual(build_chapter_frames([], 30_000), [])

    def test_zero_duration(self) -> None:
        with self.assertRaises(ZeroDuration):
            build_chapter_frames(self.chapters, 0)

    def test_malformed_start(self) -> None:
        self.chapters[1] = Chapter(title="Chapter 2", start="10:99")
        with self.assertRaises(MalformedTimeCode):
            build_chapter_frames(self.chapters, 30_000)


if __name__ == "__main__":
    unittest.main()

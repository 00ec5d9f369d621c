import unittest

from audio_chapters.errors import MalformedTimeCode, ZeroDuration
from audio_chapters.intervals import build_intervals
from audio_chapters.models import Chapter, ChapterInterval


def _chapters(*pairs):
    return [Chapter(title=title, start=start) for title, start in pairs]


class TestBuildIntervals(unittest.TestCase):
    def test_three_chapters(self) -> None:
        chapters = _chapters(
            ("Chapter 1", "00:00:00.000"),
            ("Chapter 2", "00:00:10"),
            ("Chapter 3", "00:00:20.5"),
        )
        self.assertEqual(
            build_intervals(chapters, 30_000),
            [
                ChapterInterval("1", 0, 10_000, "Chapter 1"),
                ChapterInterval("2", 10_000, 20_500, "Chapter 2"),
                ChapterInterval("3", 20_500, 30_000, "Chapter 3"),
            ],
        )

    def test_each_end_is_next_start_and_last_end_is_duration(self) -> None:
        chapters = _chapters(*((f"Part {i}", f"00:{i:02d}:00") for i in range(12)))
        intervals = build_intervals(chapters, 3_600_000)
        for current, following in zip(intervals, intervals[1:]):
            self.assertEqual(current.end_ms, following.start_ms)
        self.assertEqual(intervals[-1].end_ms, 3_600_000)
        self.assertEqual([i.element_id for i in intervals], [str(n) for n in range(1, 13)])

    def test_empty_chapter_list_needs_no_duration(self) -> None:
        self.assertEqual(build_intervals([], 0), [])
        self.assertEqual(build_intervals([], None), [])

    def test_zero_duration_is_rejected(self) -> None:
        chapters = _chapters(("Only", "00:00:00"))
        with self.assertRaises(ZeroDuration):
            build_intervals(chapters, 0)
        with self.assertRaises(ZeroDuration):
            build_intervals(chapters, None)

    def test_malformed_start_aborts_everything(self) -> None:
        chapters = _chapters(("One", "00:00:00"), ("Two", "10:99"), ("Three", "00:00:30"))
        with self.assertRaises(MalformedTimeCode):
            build_intervals(chapters, 60_000)

    def test_out_of_order_starts_are_not_rejected(self) -> None:
        chapters = _chapters(("Late", "00:00:20"), ("Early", "00:00:10"))
        intervals = build_intervals(chapters, 30_000)
        self.assertEqual(intervals[0], ChapterInterval("1", 20_000, 10_000, "Late"))
        self.assertEqual(intervals[1], ChapterInterval("2", 10_000, 30_000, "Early"))

    def test_intervals_are_immutable(self) -> None:
        interval = build_intervals(_chapters(("A", "00:00:00")), 1_000)[0]
        with self.assertRaises(AttributeError):
            interval.end_ms = 5  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()

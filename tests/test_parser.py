"""Tests for SRT parser."""

import pytest
from pathlib import Path
import tempfile

from srt_multilang.models import SrtEntry, TranslatedSrt
from srt_multilang.parser import (
    parse_srt,
    stringify_srt,
    compute_total_duration,
    format_duration,
    validate_srt_file,
    read_srt_file,
    save_translations,
)


SAMPLE = """1
00:00:01,000 --> 00:00:03,500
Hello world

2
00:00:04,000 --> 00:00:06,500
Goodbye world
"""


class TestParseSrt:

    def test_parse_simple(self):
        entries = parse_srt(SAMPLE)
        assert len(entries) == 2
        assert entries[0].index == 1
        assert entries[0].time_range == "00:00:01,000 --> 00:00:03,500"
        assert entries[0].text == "Hello world"
        assert entries[1].text == "Goodbye world"

    def test_parse_multiline_keeps_line_breaks(self):
        content = """1
00:00:01,000 --> 00:00:03,500
Line one
Line two
"""
        entries = parse_srt(content)
        assert entries[0].text == "Line one\nLine two"

    def test_parse_empty(self):
        assert parse_srt("") == []
        assert parse_srt("   \n\n  ") == []

    def test_parse_no_trailing_newline(self):
        content = "1\n00:00:01,000 --> 00:00:03,500\nFirst\n\n2\n00:00:04,000 --> 00:00:06,500\nLast entry"
        entries = parse_srt(content)
        assert len(entries) == 2
        assert entries[1].text == "Last entry"

    def test_parse_windows_line_endings(self):
        content = "1\r\n00:00:01,000 --> 00:00:03,500\r\nHello\r\nThere\r\n\r\n"
        entries = parse_srt(content)
        assert len(entries) == 1
        assert entries[0].text == "Hello\nThere"

    def test_non_contiguous_indices_kept(self):
        content = "5\n00:00:01,000 --> 00:00:02,000\nA\n\n9\n00:00:03,000 --> 00:00:04,000\nB"
        assert [e.index for e in parse_srt(content)] == [5, 9]

    @pytest.mark.parametrize(
        "description,block",
        [
            ("too few lines", "1\n00:00:01,000 --> 00:00:02,000"),
            ("non-numeric index", "abc\n00:00:01,000 --> 00:00:02,000\nText"),
            ("missing separator", "1\n00:00:01,000 00:00:02,000\nText"),
            ("zero index", "0\n00:00:01,000 --> 00:00:02,000\nText"),
            ("superscript digit index", "²\n00:00:01,000 --> 00:00:02,000\nBad"),
        ],
    )
    def test_malformed_block_is_dropped(self, description, block):
        valid = "2\n00:00:05,000 --> 00:00:06,000\nKept"
        entries = parse_srt(f"{block}\n\n{valid}")
        assert [e.text for e in entries] == ["Kept"]

    def test_only_malformed_blocks_gives_empty_result(self):
        assert parse_srt("not\na subtitle\nfile at all") == []

    def test_whitespace_only_line_stays_in_text(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nHello\n \nWorld"
        entries = parse_srt(content)
        assert len(entries) == 1
        assert entries[0].text == "Hello\n \nWorld"
        assert parse_srt(stringify_srt(entries)) == entries

    def test_timestamp_format_not_normalized(self):
        content = "1\n0:00:01.5 --> 0:00:02.25\nOdd format"
        assert parse_srt(content)[0].time_range == "0:00:01.5 --> 0:00:02.25"


class TestStringifySrt:

    def test_blocks_joined_by_blank_line(self):
        entries = [
            SrtEntry(1, "00:00:01,000 --> 00:00:03,500", "Hello"),
            SrtEntry(2, "00:00:04,000 --> 00:00:06,500", "World"),
        ]
        assert stringify_srt(entries) == (
            "1\n00:00:01,000 --> 00:00:03,500\nHello\n\n"
            "2\n00:00:04,000 --> 00:00:06,500\nWorld"
        )

    def test_round_trip(self):
        content = (
            "3\r\n00:00:01,000 --> 00:00:03,500\r\nLine one\r\nLine two\r\n\r\n"
            "7\r\n00:00:04,000 --> 00:00:06,500\r\n<i>Styled</i>\r\n\r\n"
            "junk block\r\n\r\n"
        )
        parsed = parse_srt(content)
        assert parse_srt(stringify_srt(parsed)) == parsed


class TestDuration:

    def test_empty_document(self):
        assert compute_total_duration([]) == "0s"

    def test_uses_last_end_timestamp(self):
        entries = parse_srt(SAMPLE)
        assert compute_total_duration(entries) == "6s"

    def test_hours_minutes_seconds(self):
        entries = [SrtEntry(1, "01:02:00,000 --> 01:02:05,250", "x")]
        assert compute_total_duration(entries) == "1h 2m 5s"

    def test_days(self):
        entries = [SrtEntry(1, "00:00:00,000 --> 25:00:01,000", "x")]
        assert compute_total_duration(entries) == "1d 1h 0m 1s"

    def test_missing_end_timestamp(self):
        entries = [SrtEntry(1, "00:00:01,000 --> soon", "x")]
        assert compute_total_duration(entries) == "N/A"

    def test_format_duration_under_a_second(self):
        assert format_duration(999) == "0s"
        assert format_duration(-5) == "0s"

    def test_format_duration_minutes(self):
        assert format_duration(125_000) == "2m 5s"


class TestValidateSrtFile:

    def test_nonexistent(self):
        error = validate_srt_file(Path("/nonexistent/file.srt"))
        assert "not found" in error

    def test_wrong_extension(self):
        with tempfile.NamedTemporaryFile(suffix=".txt") as f:
            error = validate_srt_file(Path(f.name))
            assert "Invalid file extension" in error

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile(suffix=".srt") as f:
            assert validate_srt_file(Path(f.name)) == "File is empty"

    def test_valid_file(self):
        with tempfile.NamedTemporaryFile(suffix=".srt", delete=False) as f:
            f.write(b"test content")
            path = Path(f.name)

        try:
            error = validate_srt_file(path)
            assert error is None
        finally:
            path.unlink()


class TestFileIO:

    def test_read_strips_bom(self):
        with tempfile.NamedTemporaryFile(suffix=".srt", delete=False) as f:
            f.write(SAMPLE.encode("utf-8-sig"))
            path = Path(f.name)

        try:
            entries = parse_srt(read_srt_file(path))
            assert entries[0].index == 1
        finally:
            path.unlink()

    def test_save_translations(self):
        results = [
            TranslatedSrt("Japanese", "movie.ja.srt", "1\n00:00:01,000 --> 00:00:02,000\nこんにちは"),
            TranslatedSrt("Spanish", "movie.es.srt", "1\n00:00:01,000 --> 00:00:02,000\nHola"),
        ]

        with tempfile.TemporaryDirectory() as tmp:
            out_dir = Path(tmp) / "out"
            paths = save_translations(results, out_dir)

            assert [p.name for p in paths] == ["movie.ja.srt", "movie.es.srt"]
            assert parse_srt(paths[1].read_text(encoding="utf-8"))[0].text == "Hola"

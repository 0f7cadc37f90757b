"""
Unit tests for the SRT parser.
"""

import pytest

from srtedit.parser import SRTParser, normalize_srt_text, parse_srt
from srtedit.utils import EmptyResultError, SubtitleLoadError

SAMPLE_SRT = """1
00:00:01,000 --> 00:00:02,500
Hello

2
00:00:03,000 --> 00:00:04,000
Second line
with two lines

3
00:00:05,000 --> 00:00:06,000
Third
"""


class TestNormalize:
    """Tests for input normalization."""

    def test_line_endings(self):
        """Test CRLF and CR are collapsed to LF."""
        assert normalize_srt_text("a\r\nb\rc") == "a\nb\nc"

    def test_trim_and_bom(self):
        """Test trimming and byte-order mark removal."""
        assert normalize_srt_text("\ufeff  \n1\n  ") == "1"


class TestSRTParser:
    """Tests for SRTParser class."""

    @pytest.fixture
    def parser(self):
        """Create a parser."""
        return SRTParser()

    def test_parse_basic(self, parser):
        """Test parsing well-formed blocks."""
        cues = parser.parse(SAMPLE_SRT)

        assert len(cues) == 3
        assert cues[0].start_time == pytest.approx(1.0)
        assert cues[0].end_time == pytest.approx(2.5)
        assert cues[0].text == "Hello"
        assert cues[1].text == "Second line\nwith two lines"
        assert [cue.source_index for cue in cues] == [1, 2, 3]
        assert parser.warnings == []

    def test_parse_crlf(self, parser):
        """Test Windows line endings give the same result."""
        cues = parser.parse(SAMPLE_SRT.replace("\n", "\r\n"))

        assert len(cues) == 3
        assert cues[1].text == "Second line\nwith two lines"

    def test_parse_empty_input(self, parser):
        """Test empty and whitespace-only input."""
        assert parser.parse("") == []
        assert parser.parse("   \n\n") == []

    def test_parse_short_garbage_is_empty(self, parser):
        """Test that trivial input is treated as an empty file."""
        assert parser.parse("abc") == []

    def test_parse_malformed_raises(self, parser):
        """Test that non-trivial input without cues is an error."""
        with pytest.raises(EmptyResultError):
            parser.parse("This is definitely not a subtitle file.")

    def test_parse_sorts_by_start(self, parser):
        """Test out-of-order blocks are sorted by start time."""
        srt = (
            "1\n00:00:05,000 --> 00:00:06,000\nC\n\n"
            "2\n00:00:01,000 --> 00:00:02,000\nA\n\n"
            "3\n00:00:03,000 --> 00:00:04,000\nB\n"
        )
        cues = parser.parse(srt)

        assert [cue.text for cue in cues] == ["A", "B", "C"]
        assert [cue.source_index for cue in cues] == [2, 3, 1]

    def test_parse_keeps_inverted_timing(self, parser):
        """Test end <= start is kept with a warning."""
        srt = "1\n00:00:05,000 --> 00:00:03,000\nBackwards\n"
        cues = parser.parse(srt)

        assert len(cues) == 1
        assert cues[0].start_time == pytest.approx(5.0)
        assert cues[0].end_time == pytest.approx(3.0)
        assert not cues[0].has_valid_timing
        assert len(parser.warnings) == 1
        assert parser.warnings[0].source_index == 1

    def test_parse_keeps_empty_text(self, parser):
        """Test a block without text is kept with a warning."""
        srt = (
            "1\n00:00:01,000 --> 00:00:02,000\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\nB\n"
        )
        cues = parser.parse(srt)

        assert len(cues) == 2
        assert cues[0].text == ""
        assert cues[1].text == "B"
        assert any("empty text" in w.message for w in parser.warnings)

    def test_parse_index_mismatch_warns(self, parser):
        """Test unexpected indices only produce a warning."""
        srt = (
            "1\n00:00:01,000 --> 00:00:02,000\nA\n\n"
            "3\n00:00:03,000 --> 00:00:04,000\nB\n"
        )
        cues = parser.parse(srt)

        assert len(cues) == 2
        assert [cue.source_index for cue in cues] == [1, 3]
        assert len(parser.warnings) == 1
        assert "Expected index 2" in parser.warnings[0].message

    def test_parse_skips_bad_timecode_block(self, parser):
        """Test a block with an invalid timecode is skipped, not fatal."""
        srt = (
            "1\n00:61:00,000 --> 00:62:00,000\nBad\n\n"
            "2\n00:00:01,000 --> 00:00:02,000\nGood\n"
        )
        cues = parser.parse(srt)

        assert len(cues) == 1
        assert cues[0].text == "Good"
        assert any("Skipping entry 1" in w.message for w in parser.warnings)

    def test_parse_only_bad_blocks_is_malformed(self, parser):
        """Test that skipping every block yields EmptyResultError."""
        srt = "1\n00:61:00,000 --> 00:62:00,000\nBad\n"
        with pytest.raises(EmptyResultError):
            parser.parse(srt)

    def test_parse_period_separator(self, parser):
        """Test '.' as millisecond separator."""
        cues = parser.parse("1\n00:00:01.250 --> 00:00:02.750\nDots\n")

        assert cues[0].start_time == pytest.approx(1.25)
        assert cues[0].end_time == pytest.approx(2.75)

    def test_parse_arrow_without_spaces(self, parser):
        """Test a timing line without spaces around the arrow."""
        cues = parser.parse("1\n00:00:01,000-->00:00:02,000\nTight\n")

        assert len(cues) == 1
        assert cues[0].end_time == pytest.approx(2.0)

    def test_parse_ignores_cue_settings(self, parser):
        """Test trailing settings after the end timecode."""
        cues = parser.parse("1\n00:00:01,000 --> 00:00:02,000 X1:10 X2:20\nPositioned\n")

        assert cues[0].text == "Positioned"
        assert cues[0].end_time == pytest.approx(2.0)

    def test_parse_text_with_inner_blank_line(self, parser):
        """Test a blank line not followed by an index stays in the text."""
        srt = (
            "1\n00:00:01,000 --> 00:00:02,000\nLine one\n\nLine two\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\nB\n"
        )
        cues = parser.parse(srt)

        assert len(cues) == 2
        assert cues[0].text == "Line one\n\nLine two"

    def test_parse_multiple_blank_lines_between_blocks(self, parser):
        """Test extra blank lines between blocks."""
        srt = (
            "1\n00:00:01,000 --> 00:00:02,000\nA\n\n\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\nB\n"
        )
        cues = parser.parse(srt)

        assert [cue.text for cue in cues] == ["A", "B"]

    def test_parse_with_bom(self, parser):
        """Test text starting with a byte-order mark."""
        cues = parser.parse("\ufeff" + SAMPLE_SRT)

        assert len(cues) == 3
        assert cues[0].source_index == 1

    def test_warnings_reset_between_parses(self, parser):
        """Test warnings only describe the last parse."""
        parser.parse("1\n00:00:05,000 --> 00:00:03,000\nBackwards\n")
        assert parser.warnings

        parser.parse(SAMPLE_SRT)
        assert parser.warnings == []


class TestParseFile:
    """Tests for reading SRT files."""

    def test_parse_file(self, tmp_path):
        """Test parsing from disk."""
        srt_file = tmp_path / "movie.srt"
        srt_file.write_text(SAMPLE_SRT, encoding="utf-8")

        cues = SRTParser().parse_file(str(srt_file))
        assert len(cues) == 3

    def test_parse_file_with_bom(self, tmp_path):
        """Test a UTF-8 file with BOM."""
        srt_file = tmp_path / "movie.srt"
        srt_file.write_bytes(b"\xef\xbb\xbf" + SAMPLE_SRT.encode("utf-8"))

        cues = SRTParser().parse_file(str(srt_file))
        assert cues[0].text == "Hello"

    def test_parse_file_missing(self, tmp_path):
        """Test a missing file."""
        with pytest.raises(SubtitleLoadError):
            SRTParser().parse_file(str(tmp_path / "missing.srt"))

    def test_parse_file_not_utf8(self, tmp_path):
        """Test a file that is not valid UTF-8."""
        srt_file = tmp_path / "latin.srt"
        srt_file.write_bytes(b"1\n00:00:01,000 --> 00:00:02,000\n\xe9t\xe9\n")

        with pytest.raises(SubtitleLoadError):
            SRTParser().parse_file(str(srt_file))


def test_parse_srt_convenience():
    """Test the module-level helper."""
    cues = parse_srt(SAMPLE_SRT)
    assert len(cues) == 3

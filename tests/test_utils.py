"""
Unit tests for utility functions.
"""

import pytest
from srtedit.utils import (
    CueIndexError,
    EmptyResultError,
    FormatError,
    SRTEditError,
    ValidationError,
    format_duration,
    format_timecode,
    get_logger,
    parse_timecode,
    video_base_name,
)


class TestParseTimecode:
    """Tests for timecode parsing."""

    def test_parse_comma_separator(self):
        """Test parsing SRT style timecodes."""
        assert parse_timecode("00:00:00,000") == 0.0
        assert parse_timecode("00:01:30,500") == pytest.approx(90.5)
        assert parse_timecode("01:01:01,234") == pytest.approx(3661.234)

    def test_parse_period_separator(self):
        """Test parsing WebVTT style timecodes."""
        assert parse_timecode("00:01:30.500") == pytest.approx(90.5)

    def test_parse_short_fraction_is_padded(self):
        """Test that 1-2 digit fractions are right-padded."""
        assert parse_timecode("00:00:01,5") == pytest.approx(1.5)
        assert parse_timecode("00:00:01,05") == pytest.approx(1.05)

    def test_parse_long_fraction_is_truncated(self):
        """Test that fractions longer than 3 digits are truncated."""
        assert parse_timecode("00:00:01,12399") == pytest.approx(1.123)

    def test_parse_surrounding_whitespace(self):
        """Test that whitespace around the timecode is ignored."""
        assert parse_timecode("  00:00:02,000 ") == pytest.approx(2.0)

    def test_parse_large_hours(self):
        """Test hours beyond two digits."""
        assert parse_timecode("100:00:00,000") == pytest.approx(360000.0)

    @pytest.mark.parametrize(
        "value",
        [
            "1:2:3",
            "00:61:00,000",
            "00:00:60,000",
            "00:00:00;000",
            "00:00:00",
            "00:00,000",
            "00:00:00:00,000",
            "aa:bb:cc,ddd",
            "-1:00:00,000",
            "0:0:00,000",
            "",
        ],
    )
    def test_parse_invalid(self, value):
        """Test that malformed timecodes raise FormatError."""
        with pytest.raises(FormatError):
            parse_timecode(value)

    def test_parse_non_string(self):
        """Test that non-string input raises FormatError."""
        with pytest.raises(FormatError):
            parse_timecode(None)

    def test_error_names_offending_string(self):
        """Test that the error message identifies the input."""
        with pytest.raises(FormatError) as exc_info:
            parse_timecode("00:99:00,000")
        assert "00:99:00,000" in str(exc_info.value)
        assert exc_info.value.value == "00:99:00,000"


class TestFormatTimecode:
    """Tests for timecode formatting."""

    def test_format_basic(self):
        """Test basic seconds to timecode conversion."""
        assert format_timecode(0) == "00:00:00,000"
        assert format_timecode(1) == "00:00:01,000"
        assert format_timecode(60) == "00:01:00,000"
        assert format_timecode(3600) == "01:00:00,000"

    def test_format_with_milliseconds(self):
        """Test conversion with fractional seconds."""
        assert format_timecode(90.5) == "00:01:30,500"
        assert format_timecode(3661.234) == "01:01:01,234"

    def test_format_period_separator(self):
        """Test WebVTT separator."""
        assert format_timecode(90.5, ".") == "00:01:30.500"

    def test_format_invalid_input_maps_to_zero(self):
        """Test negative, NaN and None input."""
        assert format_timecode(-5) == "00:00:00,000"
        assert format_timecode(float("nan")) == "00:00:00,000"
        assert format_timecode(None, ".") == "00:00:00.000"

    def test_format_rounds_milliseconds(self):
        """Test that milliseconds are rounded, not truncated."""
        assert format_timecode(1.2346) == "00:00:01,235"
        assert format_timecode(2.0004) == "00:00:02,000"

    def test_format_carries_rounded_second(self):
        """Test that 999.6ms rounds up into the next second."""
        assert format_timecode(1.9996) == "00:00:02,000"
        assert format_timecode(59.9999) == "00:01:00,000"

    def test_format_large_hours(self):
        """Test hours wider than two digits."""
        assert format_timecode(360000) == "100:00:00,000"

    def test_format_invalid_separator(self):
        """Test that only comma and period are accepted."""
        with pytest.raises(ValueError):
            format_timecode(1.0, ";")

    def test_roundtrip(self):
        """Test parse(format(x)) stays within a millisecond."""
        for millis in range(0, 10_000_000, 7919):
            original = millis / 1000.0
            result = parse_timecode(format_timecode(original, ","))
            assert abs(result - original) < 0.001

    def test_roundtrip_period(self):
        """Test roundtrip with the WebVTT separator."""
        original = 3725.042
        assert parse_timecode(format_timecode(original, ".")) == pytest.approx(original, abs=0.001)


class TestFormatDuration:
    """Tests for human-readable durations."""

    def test_format_duration(self):
        """Test human-readable duration formatting."""
        assert format_duration(0) == "0s"
        assert format_duration(30) == "30s"
        assert format_duration(90) == "1m 30s"
        assert format_duration(3661) == "1h 1m 1s"
        assert format_duration(7200) == "2h"


class TestHelpers:
    """Tests for small helpers."""

    def test_video_base_name(self):
        """Test stripping directory and extension."""
        assert video_base_name("/videos/episode 01.mp4") == "episode 01"
        assert video_base_name("clip.final.mkv") == "clip.final"
        assert video_base_name(".mp4") == "video"
        assert video_base_name(None) is None
        assert video_base_name("") is None

    def test_get_logger_namespace(self):
        """Test loggers live under the package namespace."""
        assert get_logger("srtedit.parser").name == "srtedit.parser"
        assert get_logger("tools").name == "srtedit.tools"


class TestExceptions:
    """Tests for custom exception classes."""

    def test_format_error_is_value_error(self):
        """Test FormatError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise FormatError("x")

    def test_cue_index_error_is_index_error(self):
        """Test CueIndexError can be caught as IndexError."""
        with pytest.raises(IndexError):
            raise CueIndexError("out of range")

    def test_common_base(self):
        """Test all errors share the package base class."""
        for error_class in (FormatError, ValidationError, CueIndexError, EmptyResultError):
            assert issubclass(error_class, SRTEditError)

"""
Utility functions for SRTEdit.

Includes timecode conversion, logging setup, file helpers
and custom exception classes.
"""

import logging
import math
import os
import re
import sys
from typing import Optional


# ============================================================================
# Custom Exception Classes
# ============================================================================


class SRTEditError(Exception):
    """Base exception for all SRTEdit errors."""

    pass


class FormatError(SRTEditError, ValueError):
    """Raised when a timecode string is malformed."""

    def __init__(self, value, reason: str = ""):
        self.value = value
        self.reason = reason
        message = f'Invalid time format: "{value}"'
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ValidationError(SRTEditError):
    """Raised when an edit would make a cue's start time not precede its end time."""

    pass


class CueIndexError(SRTEditError, IndexError):
    """Raised when a cue index is outside the current sequence."""

    pass


class EmptyResultError(SRTEditError):
    """Raised when non-trivial subtitle text yields no usable cues."""

    pass


class SubtitleLoadError(SRTEditError):
    """Raised when a subtitle file cannot be read."""

    pass


class NothingToExportError(SRTEditError):
    """Raised when exporting an empty cue sequence."""

    pass


class ExportAdvisoryError(SRTEditError):
    """Raised when an export has advisories and was not forced."""

    def __init__(self, export):
        self.export = export
        problems = []
        if export.invalid_timing:
            problems.append("invalid timing (end <= start)")
        if export.overlap:
            problems.append("overlapping cues")
        super().__init__("Export has timing problems: " + ", ".join(problems))


class TrackError(SRTEditError):
    """Raised when a caption track cannot be attached."""

    pass


# ============================================================================
# Timecode Utilities
# ============================================================================

_TIMECODE_PATTERN = re.compile(r"^(\d+):(\d+):(\d+)([,.])(\d+)$", re.ASCII)


def parse_timecode(timecode: str) -> float:
    """
    Convert a timecode (HH:MM:SS,mmm or HH:MM:SS.mmm) to seconds.

    The fractional part may have 1-3 digits; it is right-padded with zeros
    to three digits, and longer fractions are truncated to milliseconds.

    Args:
        timecode: Timecode string

    Returns:
        Time in seconds as float

    Raises:
        FormatError: If the string is not a valid timecode

    Example:
        >>> parse_timecode('00:01:30,500')
        90.5
        >>> parse_timecode('01:01:01.2')
        3661.2
    """
    if not isinstance(timecode, str):
        raise FormatError(timecode, "not a string")

    text = timecode.strip()
    if text.count(":") != 2:
        raise FormatError(timecode, "expected three colon-separated fields")

    match = _TIMECODE_PATTERN.match(text)
    if not match:
        raise FormatError(timecode, "expected HH:MM:SS,mmm")

    hours_str, minutes_str, seconds_str, _, fraction = match.groups()
    if len(minutes_str) != 2 or len(seconds_str) != 2:
        raise FormatError(timecode, "minutes and seconds need two digits")

    hours = int(hours_str)
    minutes = int(minutes_str)
    seconds = int(seconds_str)
    milliseconds = int(fraction.ljust(3, "0")[:3])

    if minutes > 59 or seconds > 59:
        raise FormatError(timecode, "component out of range")

    return hours * 3600 + minutes * 60 + seconds + milliseconds / 1000.0


def format_timecode(seconds: Optional[float], separator: str = ",") -> str:
    """
    Convert seconds to a canonical timecode.

    Negative, None or NaN input yields the zero timecode.

    Args:
        seconds: Time in seconds
        separator: Millisecond separator, "," for SRT or "." for WebVTT

    Returns:
        Formatted timecode string

    Example:
        >>> format_timecode(90.5)
        '00:01:30,500'
        >>> format_timecode(3661.234, ".")
        '01:01:01.234'
    """
    if separator not in (",", "."):
        raise ValueError(f"Unsupported separator: {separator!r}")

    if seconds is None or math.isnan(seconds) or seconds < 0:
        seconds = 0.0

    # Rounded milliseconds can reach 1000, so carry through integer millis
    whole = math.floor(seconds)
    millis = math.floor((seconds % 1) * 1000 + 0.5)
    total_ms = whole * 1000 + millis

    hours = total_ms // 3_600_000
    minutes = (total_ms % 3_600_000) // 60_000
    secs = (total_ms % 60_000) // 1000
    milliseconds = total_ms % 1000

    return f"{hours:02d}:{minutes:02d}:{secs:02d}{separator}{milliseconds:03d}"


def format_duration(seconds: float) -> str:
    """
    Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Human-readable duration string

    Example:
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3661)
        '1h 1m 1s'
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)


# ============================================================================
# Logging Configuration
# ============================================================================


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up logging configuration for SRTEdit.

    Args:
        verbose: Enable DEBUG level logging if True, otherwise INFO
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG for file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("srtedit")
    logger.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    if name.startswith("srtedit"):
        return logging.getLogger(name)
    return logging.getLogger(f"srtedit.{name}")


# ============================================================================
# File Utilities
# ============================================================================


def validate_file_exists(file_path: str) -> bool:
    """
    Check if a file exists.

    Args:
        file_path: Path to file

    Returns:
        True if file exists, False otherwise
    """
    return os.path.isfile(file_path)


def video_base_name(video_name: Optional[str]) -> Optional[str]:
    """
    Strip directory and extension from a video file name.

    Example:
        >>> video_base_name("/videos/episode 01.mp4")
        'episode 01'
        >>> video_base_name(".mp4")
        'video'
    """
    if not video_name:
        return None
    name = os.path.basename(video_name)
    base, _ = os.path.splitext(name)
    if name.startswith(".") and base == name:
        # splitext treats ".mp4" as a name without extension
        base = ""
    return base or "video"

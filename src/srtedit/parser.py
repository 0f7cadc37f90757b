"""
SRT parser module for SRTEdit.

Turns raw SRT text into an ordered list of cues, skipping blocks
whose timecodes cannot be decoded and keeping (but flagging)
blocks with suspicious timing or empty text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .cue import Cue
from .utils import (
    EmptyResultError,
    FormatError,
    SubtitleLoadError,
    get_logger,
    parse_timecode,
    validate_file_exists,
)

logger = get_logger(__name__)

# Index line, timing line, then free text up to a blank line that is
# followed by the next index line, or the end of input.
_BLOCK_PATTERN = re.compile(
    r"^(\d+)[ \t]*\n"
    r"[ \t]*(\S+?)[ \t]*-->[ \t]*(\S+)[^\n]*"
    r"(.*?)"
    r"(?=\n[ \t]*\n\s*\d+[ \t]*\n|\s*\Z)",
    re.MULTILINE | re.DOTALL,
)

BYTE_ORDER_MARK = "\ufeff"


@dataclass
class ParseWarning:
    """A non-fatal problem found while parsing one block."""

    source_index: Optional[int]
    message: str


def normalize_srt_text(data: str) -> str:
    """
    Normalize line endings, drop a leading byte-order mark and trim.

    Args:
        data: Raw SRT text

    Returns:
        Normalized text using '\\n' line endings
    """
    data = data.replace("\r\n", "\n").replace("\r", "\n")
    if data.startswith(BYTE_ORDER_MARK):
        data = data[len(BYTE_ORDER_MARK):]
    return data.strip()


class SRTParser:
    """
    Parses SRT subtitle text into cues.

    Index mismatches, inverted timing and empty text are tolerated and
    recorded as warnings; a block with an undecodable timecode is skipped.
    """

    def __init__(self, malformed_threshold: int = 10):
        """
        Initialize the parser.

        Args:
            malformed_threshold: Inputs longer than this many characters that
                yield no cues are treated as malformed (default: 10)
        """
        self.malformed_threshold = malformed_threshold
        self.warnings: List[ParseWarning] = []

    def _warn(self, source_index: Optional[int], message: str):
        self.warnings.append(ParseWarning(source_index, message))
        logger.warning(f"SRT parse warning: {message}")

    def parse(self, raw_text: str) -> List[Cue]:
        """
        Parse SRT content into cues sorted by start time.

        Args:
            raw_text: Complete SRT file content

        Returns:
            List of Cue objects sorted by start time (empty for blank input)

        Raises:
            EmptyResultError: If non-trivial input produced no cues
        """
        self.warnings = []
        data = normalize_srt_text(raw_text or "")
        if not data:
            logger.debug("Empty SRT input, nothing to parse")
            return []

        cues = []
        expected_index = 1

        for match in _BLOCK_PATTERN.finditer(data):
            index = int(match.group(1))
            start_str = match.group(2)
            end_str = match.group(3)
            text = match.group(4).strip()

            if index != expected_index:
                self._warn(index, f"Expected index {expected_index}, but found {index}")

            try:
                start_time = parse_timecode(start_str)
                end_time = parse_timecode(end_str)
            except FormatError as e:
                self._warn(index, f"Skipping entry {index}: {e}")
                continue

            if end_time <= start_time:
                self._warn(
                    index,
                    f"Entry {index} has end time ({end_str}) before or equal to "
                    f"start time ({start_str}), keeping original times",
                )

            if not text:
                self._warn(index, f"Entry {index} has empty text")

            cues.append(
                Cue(start_time=start_time, end_time=end_time, text=text, source_index=index)
            )
            expected_index = index + 1

        if not cues and len(data) > self.malformed_threshold:
            logger.error("SRT parsing produced 0 cues although input data was present")
            raise EmptyResultError(
                "No valid subtitles found in the file. Please check the SRT format."
            )

        cues.sort(key=lambda cue: cue.start_time)

        logger.info(f"Parsed {len(cues)} cues ({len(self.warnings)} warnings)")
        return cues

    def read_file(self, srt_path: str) -> str:
        """
        Read an SRT file as UTF-8 text.

        Args:
            srt_path: Path to the SRT file

        Returns:
            File content

        Raises:
            SubtitleLoadError: If the file is missing or not valid UTF-8
        """
        if not validate_file_exists(srt_path):
            raise SubtitleLoadError(f"SRT file not found: {srt_path}")

        try:
            with open(srt_path, "r", encoding="utf-8-sig") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise SubtitleLoadError(f"SRT file is not valid UTF-8: {srt_path} ({e})")
        except OSError as e:
            raise SubtitleLoadError(f"Cannot read SRT file {srt_path}: {e}")

        logger.debug(f"Read {len(content)} characters from {srt_path}")
        return content

    def parse_file(self, srt_path: str) -> List[Cue]:
        """
        Read and parse an SRT file.

        Args:
            srt_path: Path to the SRT file

        Returns:
            List of Cue objects sorted by start time
        """
        logger.info(f"Parsing SRT file: {srt_path}")
        return self.parse(self.read_file(srt_path))


def parse_srt(raw_text: str) -> List[Cue]:
    """
    Convenience function to parse SRT text.

    Args:
        raw_text: Complete SRT file content

    Returns:
        List of Cue objects sorted by start time
    """
    return SRTParser().parse(raw_text)

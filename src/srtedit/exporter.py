"""
Subtitle exporter module for SRTEdit.

Renders cues back to SRT text (with advisory flags for timing
problems) and to the WebVTT caption track used for live preview.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .cue import Cue
from .parser import BYTE_ORDER_MARK
from .utils import (
    ExportAdvisoryError,
    format_timecode,
    get_logger,
    video_base_name,
)

logger = get_logger(__name__)

VTT_HEADER = "WEBVTT"
DEFAULT_EXPORT_NAME = "edited_subtitles"
EXPORT_SUFFIX = "_edited"


@dataclass
class SRTExport:
    """Generated SRT text plus the advisory flags found while generating it."""

    text: str
    invalid_timing: bool = False
    overlap: bool = False
    cue_count: int = 0

    @property
    def has_advisories(self) -> bool:
        return self.invalid_timing or self.overlap

    def encode(self) -> bytes:
        return self.text.encode("utf-8")


def export_filename(video_name: Optional[str] = None) -> str:
    """
    Derive the export file name from the loaded video's name.

    Example:
        >>> export_filename("holiday.mp4")
        'holiday_edited.srt'
        >>> export_filename(None)
        'edited_subtitles.srt'
    """
    base = video_base_name(video_name)
    if base is None:
        return f"{DEFAULT_EXPORT_NAME}.srt"
    return f"{base}{EXPORT_SUFFIX}.srt"


class SRTExporter:
    """
    Exports cues to SRT and WebVTT text.

    SRT export keeps every cue and reports timing problems as advisories;
    the caption track silently drops cues it cannot display.
    """

    def _format_srt_block(self, index: int, cue: Cue) -> str:
        """
        Format a single SRT subtitle block.

        Args:
            index: Subtitle number (1-indexed)
            cue: Cue to format

        Returns:
            Formatted SRT block
        """
        start_time = format_timecode(cue.start_time, ",")
        end_time = format_timecode(cue.end_time, ",")
        return f"{index}\n{start_time} --> {end_time}\n{cue.text.strip()}\n\n"

    def to_srt(self, cues: List[Cue]) -> SRTExport:
        """
        Render cues as SRT text.

        Cues are re-sorted by start time and renumbered from 1. The text
        starts with a byte-order mark.

        Args:
            cues: Cues to export

        Returns:
            SRTExport with the text and advisory flags
        """
        ordered = sorted(cues, key=lambda cue: cue.start_time)
        logger.info(f"Exporting {len(ordered)} cues to SRT format")

        blocks = []
        invalid_timing = False
        overlap = False
        last_end_time = 0.0

        for i, cue in enumerate(ordered, start=1):
            if cue.end_time <= cue.start_time:
                logger.warning(
                    f"Invalid timing for line {i} (end <= start): "
                    f"{format_timecode(cue.start_time)} --> {format_timecode(cue.end_time)}"
                )
                invalid_timing = True
            if cue.start_time < last_end_time:
                logger.warning(
                    f"Overlap detected for line {i}: start {format_timecode(cue.start_time)} "
                    f"is before previous end {format_timecode(last_end_time)}"
                )
                overlap = True
            if not cue.text.strip():
                logger.warning(f"Line {i} has empty text")

            blocks.append(self._format_srt_block(i, cue))
            last_end_time = cue.end_time

        return SRTExport(
            text=BYTE_ORDER_MARK + "".join(blocks),
            invalid_timing=invalid_timing,
            overlap=overlap,
            cue_count=len(ordered),
        )

    def to_caption_track(self, cues: List[Cue]) -> str:
        """
        Render cues as a WebVTT caption track for live preview.

        Cues with empty text or end <= start are skipped.

        Args:
            cues: Cues in sequence order

        Returns:
            WebVTT text
        """
        parts = [f"{VTT_HEADER}\n\n"]
        skipped = 0

        for i, cue in enumerate(cues):
            text = cue.text.strip()
            if cue.end_time > cue.start_time and text:
                start_time = format_timecode(cue.start_time, ".")
                end_time = format_timecode(cue.end_time, ".")
                parts.append(f"{start_time} --> {end_time}\n{text}\n\n")
            else:
                logger.debug(f"Skipping invalid cue {i} for caption track")
                skipped += 1

        if skipped:
            logger.debug(f"Caption track omits {skipped} cues")
        return "".join(parts)

    def export_to_file(self, cues: List[Cue], output_path: str, force: bool = False) -> SRTExport:
        """
        Export cues to an SRT file.

        Args:
            cues: Cues to export
            output_path: Path to output SRT file
            force: Write even if advisories were found

        Returns:
            The SRTExport that was written

        Raises:
            ExportAdvisoryError: If advisories were found and force is False
        """
        export = self.to_srt(cues)
        if export.has_advisories and not force:
            raise ExportAdvisoryError(export)

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_bytes(export.encode())

        logger.info(f"Exported {export.cue_count} subtitles to {output_path}")
        return export


def export_to_srt(cues: List[Cue], output_path: str, force: bool = False) -> Dict[str, any]:
    """
    Convenience function to export cues to an SRT file.

    Args:
        cues: Cues to export
        output_path: Path to output SRT file
        force: Write even if timing advisories were found

    Returns:
        Dictionary with export statistics
    """
    export = SRTExporter().export_to_file(cues, output_path, force=force)

    return {
        "output_subtitles": export.cue_count,
        "invalid_timing": export.invalid_timing,
        "overlap": export.overlap,
        "output_file": str(Path(output_path).resolve()),
    }


def export_to_vtt(cues: List[Cue], output_path: str) -> Dict[str, any]:
    """
    Convenience function to write the caption track to a file.

    Args:
        cues: Cues to export
        output_path: Path to output VTT file

    Returns:
        Dictionary with export statistics
    """
    text = SRTExporter().to_caption_track(cues)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(text)

    return {
        "input_cues": len(cues),
        "output_cues": sum(1 for cue in cues if cue.has_valid_timing and cue.text.strip()),
        "output_file": str(Path(output_path).resolve()),
    }

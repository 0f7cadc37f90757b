"""
SRTEdit: SRT subtitle editing core

Parses SRT subtitles into an ordered cue sequence, keeps it consistent
while cues are inserted, deleted and re-timed, follows a playback clock
to find the active cue, and exports back to SRT and WebVTT.
"""

__version__ = "0.1.0"
__author__ = "SRTEdit Contributors"
__license__ = "MIT"

from .cli import main as cli_main
from .cue import Cue
from .exporter import SRTExport, SRTExporter, export_filename, export_to_srt, export_to_vtt
from .parser import ParseWarning, SRTParser, parse_srt
from .session import EditorSession
from .store import CueStore
from .synchronizer import CueSynchronizer, Transition, find_active_index
from .track import CaptionTrack, TrackState
from .utils import (
    CueIndexError,
    EmptyResultError,
    ExportAdvisoryError,
    FormatError,
    NothingToExportError,
    SRTEditError,
    SubtitleLoadError,
    TrackError,
    ValidationError,
    format_timecode,
    parse_timecode,
)

__all__ = [
    "__version__",
    "parse_timecode",
    "format_timecode",
    "SRTEditError",
    "FormatError",
    "ValidationError",
    "CueIndexError",
    "EmptyResultError",
    "SubtitleLoadError",
    "ExportAdvisoryError",
    "NothingToExportError",
    "TrackError",
    "Cue",
    "SRTParser",
    "ParseWarning",
    "parse_srt",
    "CueStore",
    "SRTExporter",
    "SRTExport",
    "export_filename",
    "export_to_srt",
    "export_to_vtt",
    "CueSynchronizer",
    "Transition",
    "find_active_index",
    "CaptionTrack",
    "TrackState",
    "EditorSession",
    "cli_main",
]

"""
Editor session module for SRTEdit.

An EditorSession is the single owner of the cue sequence. It wires the
parser, store, exporter, synchronizer and caption track together and
reacts to notifications from the playback and file-load collaborators.
"""

import math
from pathlib import Path
from typing import List, Optional, Union

from .cue import Cue
from .exporter import SRTExport, SRTExporter, export_filename
from .parser import ParseWarning, SRTParser
from .store import CueStore
from .synchronizer import CueSynchronizer, Transition
from .track import CaptionTrack, TrackState
from .utils import (
    EmptyResultError,
    NothingToExportError,
    SRTEditError,
    SubtitleLoadError,
    TrackError,
    get_logger,
)

logger = get_logger(__name__)


class EditorSession:
    """
    Session context for one editing session.

    Created empty; the cue sequence is replaced wholesale by each
    successful load and edited in place afterwards. Loads are identified
    by tickets so that only the most recently started load can apply.
    """

    def __init__(
        self,
        seek_step: float = 5.0,
        track_label: str = "Edited subtitles",
        track_language: str = "en",
        **store_options,
    ):
        """
        Initialize an empty session.

        Args:
            seek_step: Seconds moved by seek_backward/seek_forward (default: 5.0)
            track_label: Label of the preview caption track
            track_language: Language code of the preview caption track
            **store_options: Passed to CueStore (default_duration, min_gap, ...)
        """
        self.seek_step = seek_step
        self.parser = SRTParser()
        self.exporter = SRTExporter()
        self.store = CueStore(**store_options)
        self.synchronizer = CueSynchronizer(self.store)
        self.track = CaptionTrack(label=track_label, language=track_language)

        self.subtitles_loaded = False
        self.parse_warnings: List[ParseWarning] = []
        self.subtitle_source: Optional[str] = None

        self.video_name: Optional[str] = None
        self.video_loaded = False
        self.video_error: Optional[str] = None
        self.duration: Optional[float] = None
        self.position = 0.0
        # Re-sync result of the most recent edit
        self.last_transition: Optional[Transition] = None

        self._latest_ticket = 0

    # ------------------------------------------------------------------
    # State exposed to presentation collaborators
    # ------------------------------------------------------------------

    @property
    def cues(self) -> List[Cue]:
        return self.store.cues

    @property
    def is_loaded(self) -> bool:
        return self.subtitles_loaded

    @property
    def active_index(self) -> Optional[int]:
        return self.synchronizer.active_index

    @property
    def caption_track_text(self) -> Optional[str]:
        return self.track.text

    @property
    def export_filename(self) -> str:
        return export_filename(self.video_name)

    # ------------------------------------------------------------------
    # Subtitle loading
    # ------------------------------------------------------------------

    def begin_load(self, source: Optional[str] = None) -> int:
        """
        Register a new load request.

        Any load started earlier becomes obsolete: its result will be
        discarded when it completes.

        Returns:
            Ticket identifying this load
        """
        self._latest_ticket += 1
        logger.debug(f"Load {self._latest_ticket} started ({source or 'text'})")
        return self._latest_ticket

    def is_current_load(self, ticket: int) -> bool:
        return ticket == self._latest_ticket

    def complete_load(self, ticket: int, text: str, source: Optional[str] = None) -> bool:
        """
        Apply the full text of a finished load.

        Args:
            ticket: Ticket from begin_load()
            text: Complete decoded SRT text
            source: Optional file name, for diagnostics

        Returns:
            True if applied, False if the load was superseded

        Raises:
            EmptyResultError: If the text is non-trivial but has no valid cues
        """
        if not self.is_current_load(ticket):
            logger.info(f"Discarding result of superseded load {ticket}")
            return False

        try:
            cues = self.parser.parse(text)
        except EmptyResultError:
            self._reset_subtitles()
            raise

        self.store.replace_all(cues)
        self.parse_warnings = list(self.parser.warnings)
        self.subtitles_loaded = True
        self.subtitle_source = source
        logger.info(f"Loaded {len(cues)} subtitles")

        self._rebuild_track()
        return True

    def fail_load(self, ticket: int, reason: str) -> bool:
        """
        Record that a load could not be read.

        Returns:
            True if this was the current load and the session was reset
        """
        if not self.is_current_load(ticket):
            logger.info(f"Ignoring failure of superseded load {ticket}: {reason}")
            return False

        logger.error(f"Subtitle load failed: {reason}")
        self._reset_subtitles()
        return True

    def load_text(self, text: str) -> bool:
        """Load SRT text in one step."""
        return self.complete_load(self.begin_load(), text)

    def load_file(self, srt_path: str) -> bool:
        """
        Read and load an SRT file in one step.

        Raises:
            SubtitleLoadError: If the file cannot be read
            EmptyResultError: If the file has no valid cues
        """
        ticket = self.begin_load(srt_path)
        try:
            text = self.parser.read_file(srt_path)
        except SubtitleLoadError as e:
            self.fail_load(ticket, str(e))
            raise
        return self.complete_load(ticket, text, source=srt_path)

    def _reset_subtitles(self):
        self.store.clear()
        self.parse_warnings = list(self.parser.warnings)
        self.subtitles_loaded = False
        self.subtitle_source = None
        self._rebuild_track()

    # ------------------------------------------------------------------
    # Playback collaborator notifications
    # ------------------------------------------------------------------

    def set_video(self, video_name: str):
        """A new video was selected; wait for metadata before using it."""
        self.video_name = video_name
        self.video_loaded = False
        self.video_error = None
        self.duration = None
        logger.info(f"Video selected: {video_name}")

    def metadata_ready(self, duration: Optional[float]) -> Transition:
        """The player knows the video's duration; re-sync with forced attention."""
        if duration is None or math.isnan(duration) or math.isinf(duration):
            self.duration = None
        else:
            self.duration = duration
        self.video_loaded = True
        logger.info(f"Video metadata loaded. Duration: {self.duration}")
        return self.synchronizer.update(self.position, jumped=True)

    def video_failed(self, message: str):
        self.video_loaded = False
        self.video_error = message
        logger.error(f"Video loading error: {message}")

    def position_advanced(self, position: float) -> Transition:
        """Periodic time update during playback."""
        self.position = position
        return self.synchronizer.update(position)

    def position_jumped(self, position: float) -> Transition:
        """Seek completed; the active cue is always reasserted."""
        self.position = position
        return self.synchronizer.update(position, jumped=True)

    def track_registered(self, generation: int) -> Optional[Transition]:
        """
        The player confirmed a caption track.

        Returns:
            A forced transition if the track became active, else None
        """
        if self.track.confirm(generation):
            return self.synchronizer.update(self.position, jumped=True)
        return None

    def seek_to_cue(self, index: int) -> float:
        """Jump playback to the start of a cue and return the new position."""
        target = self.store[index].start_time
        self.position_jumped(target)
        return target

    def seek_by(self, delta: float) -> float:
        """Move playback by delta seconds, clamped to the video."""
        target = max(0.0, self.position + delta)
        if self.duration is not None:
            target = min(self.duration, target)
        self.position_jumped(target)
        return target

    def seek_backward(self) -> float:
        return self.seek_by(-self.seek_step)

    def seek_forward(self) -> float:
        return self.seek_by(self.seek_step)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _rebuild_track(self) -> Optional[int]:
        """Regenerate the caption track from scratch and forget the active cue."""
        self.synchronizer.reset()
        if self.track.state is not TrackState.UNATTACHED:
            self.track.detach()
        if len(self.store) == 0:
            return None

        try:
            return self.track.attach(self.exporter.to_caption_track(self.store.cues))
        except TrackError as e:
            logger.warning(f"Caption track not attached: {e}")
            return None

    def _after_edit(self) -> Transition:
        self._rebuild_track()
        self.last_transition = self.synchronizer.update(self.position)
        return self.last_transition

    def insert_adjacent(self, ref_index: int, position: str = "below") -> int:
        new_index = self.store.insert_adjacent(ref_index, position, total_duration=self.duration)
        self._after_edit()
        return new_index

    def delete(self, index: int) -> Cue:
        removed = self.store.delete(index)
        self._after_edit()
        return removed

    def retime(self, index: int, field: str, value: Union[float, str]) -> int:
        new_index = self.store.retime(index, field, value)
        self._after_edit()
        return new_index

    def set_text(self, index: int, text: str):
        self.store.set_text(index, text)
        self._after_edit()

    def set_time_from_playback(self, index: int, field: str) -> int:
        """Set a cue's start or end to the current playback position."""
        if not self.video_loaded:
            raise SRTEditError("Video is not ready")
        return self.retime(index, field, self.position)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> SRTExport:
        """
        Generate SRT text for the current sequence.

        Raises:
            NothingToExportError: If there are no cues
        """
        if len(self.store) == 0:
            raise NothingToExportError("No subtitles to export")
        return self.exporter.to_srt(self.store.cues)

    def write_export(
        self,
        output_path: Optional[str] = None,
        directory: Optional[str] = None,
        force: bool = False,
    ) -> SRTExport:
        """
        Write the exported SRT file.

        Args:
            output_path: Target path; defaults to export_filename
            directory: Directory for the default file name
            force: Write even if timing advisories were found

        Returns:
            The written SRTExport
        """
        if len(self.store) == 0:
            raise NothingToExportError("No subtitles to export")
        if output_path is None:
            output_path = str(Path(directory or ".") / self.export_filename)
        return self.exporter.export_to_file(self.store.cues, output_path, force=force)

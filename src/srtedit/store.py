"""
Cue store module for SRTEdit.

Holds the session's cue sequence in start-time order and applies
edits (insert, delete, retime, text change) without ever leaving
the sequence half-modified.
"""

import math
from typing import Iterator, List, Optional, Union

from .cue import Cue
from .utils import (
    CueIndexError,
    ValidationError,
    format_timecode,
    get_logger,
    parse_timecode,
)

logger = get_logger(__name__)

POSITIONS = ("above", "below")
FIELDS = ("start", "end")


class CueStore:
    """
    Ordered, in-memory collection of cues.

    The sequence is re-sorted by start time after every mutation, so
    positions are only valid until the next edit.
    """

    def __init__(
        self,
        cues: Optional[List[Cue]] = None,
        default_duration: float = 2.5,
        min_gap: float = 0.01,
        min_duration: float = 0.1,
        placeholder_text: str = "New subtitle...",
        tail_fallback: float = 10.0,
    ):
        """
        Initialize the store.

        Args:
            cues: Initial cues (copied and sorted)
            default_duration: Target duration of inserted cues in seconds (default: 2.5)
            min_gap: Gap kept between an inserted cue and its neighbours (default: 0.01)
            min_duration: Shortest cue ever synthesized (default: 0.1)
            placeholder_text: Text of inserted cues
            tail_fallback: Room assumed after the last cue when the total
                duration is unknown (default: 10.0)
        """
        self.default_duration = default_duration
        self.min_gap = min_gap
        self.min_duration = min_duration
        self.placeholder_text = placeholder_text
        self.tail_fallback = tail_fallback
        self._cues: List[Cue] = []
        if cues:
            self.replace_all(cues)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._cues)

    def __iter__(self) -> Iterator[Cue]:
        return iter(list(self._cues))

    def __getitem__(self, index: int) -> Cue:
        self._check_index(index)
        return self._cues[index]

    @property
    def cues(self) -> List[Cue]:
        """Snapshot of the current sequence in start-time order."""
        return list(self._cues)

    def previous(self, index: int) -> Optional[Cue]:
        """Cue immediately before the given position, if any."""
        self._check_index(index)
        return self._cues[index - 1] if index > 0 else None

    def next(self, index: int) -> Optional[Cue]:
        """Cue immediately after the given position, if any."""
        self._check_index(index)
        return self._cues[index + 1] if index < len(self._cues) - 1 else None

    def overlaps(self, index: int) -> bool:
        """Check whether the cue at index overlaps either neighbour."""
        cue = self[index]
        prev_cue = self.previous(index)
        next_cue = self.next(index)
        if prev_cue is not None and cue.start_time < prev_cue.end_time:
            return True
        if next_cue is not None and cue.end_time > next_cue.start_time:
            return True
        return False

    def _check_index(self, index: int):
        if not isinstance(index, int) or isinstance(index, bool):
            raise CueIndexError(f"Cue index must be an integer, got {index!r}")
        if index < 0 or index >= len(self._cues):
            raise CueIndexError(
                f"Cue index {index} out of range (sequence has {len(self._cues)} cues)"
            )

    def _sort(self):
        self._cues.sort(key=lambda cue: cue.start_time)

    def _position_of(self, cue: Cue) -> int:
        for i, candidate in enumerate(self._cues):
            if candidate is cue:
                return i
        raise CueIndexError("Cue is not part of this sequence")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def replace_all(self, cues: List[Cue]):
        """Replace the whole sequence (used on load, never merged)."""
        self._cues = [cue.copy() for cue in cues]
        self._sort()
        logger.debug(f"Cue store replaced with {len(self._cues)} cues")

    def clear(self):
        self._cues = []

    def _place_above(self, index: int):
        ref = self._cues[index]
        prev_cue = self.previous(index)
        prev_end = prev_cue.end_time if prev_cue is not None else 0.0
        gap = self.min_gap

        start = max(prev_end + gap, ref.start_time - self.default_duration - gap)
        end = min(ref.start_time - gap, start + self.default_duration)
        if end <= start:
            end = start + self.min_duration
        end = min(ref.start_time - gap, end)
        start = max(prev_end + gap, start)
        return start, end

    def _place_below(self, index: int, total_duration: Optional[float]):
        ref = self._cues[index]
        next_cue = self.next(index)
        if next_cue is not None:
            next_start = next_cue.start_time
        elif total_duration:
            next_start = total_duration
        else:
            next_start = ref.end_time + self.tail_fallback
        gap = self.min_gap

        start = ref.end_time + gap
        end = min(next_start - gap, start + self.default_duration)
        if end <= start:
            end = start + self.min_duration
        start = max(ref.end_time + gap, start)
        end = min(next_start - gap, end)
        return start, end

    def insert_adjacent(
        self,
        ref_index: int,
        position: str = "below",
        total_duration: Optional[float] = None,
    ) -> int:
        """
        Insert a placeholder cue next to an existing one.

        The new cue aims for the default duration and keeps the minimum
        gap to its neighbours; when there is not enough room it still
        lasts at least min_duration.

        Args:
            ref_index: Position of the reference cue
            position: "above" (before the reference) or "below" (after it)
            total_duration: Playback duration, used as the limit after the last cue

        Returns:
            Position of the new cue in the sorted sequence
        """
        self._check_index(ref_index)
        if position not in POSITIONS:
            raise ValueError(f"Position must be 'above' or 'below', got {position!r}")

        if position == "above":
            start, end = self._place_above(ref_index)
        else:
            start, end = self._place_below(ref_index, total_duration)

        start = max(0.0, start)
        end = max(start + self.min_duration, end)

        new_cue = Cue(start_time=start, end_time=end, text=self.placeholder_text)
        insert_at = ref_index if position == "above" else ref_index + 1
        self._cues.insert(insert_at, new_cue)
        self._sort()

        new_index = self._position_of(new_cue)
        logger.info(
            f"Inserted cue {position} #{ref_index} at position {new_index}: "
            f"{format_timecode(start)} --> {format_timecode(end)}"
        )
        if self.overlaps(new_index):
            logger.warning(f"Inserted cue at position {new_index} overlaps a neighbour")
        return new_index

    def delete(self, index: int) -> Cue:
        """
        Remove the cue at index.

        Returns:
            The removed cue
        """
        self._check_index(index)
        removed = self._cues.pop(index)
        logger.info(f"Deleted cue at position {index}")
        return removed

    def retime(self, index: int, field: str, value: Union[float, str]) -> int:
        """
        Change the start or end time of a cue.

        Args:
            index: Position of the cue
            field: "start" or "end"
            value: New time in seconds, or a timecode string

        Returns:
            Position of the cue after re-sorting

        Raises:
            FormatError: If value is a malformed timecode
            ValidationError: If the change would make start >= end
                or the time is negative or not finite
        """
        self._check_index(index)
        if field not in FIELDS:
            raise ValueError(f"Field must be 'start' or 'end', got {field!r}")

        seconds = parse_timecode(value) if isinstance(value, str) else float(value)
        if not math.isfinite(seconds):
            raise ValidationError(f"Time must be a finite number, got {seconds}")
        cue = self._cues[index]

        if field == "start" and seconds >= cue.end_time:
            raise ValidationError(
                f"Start time {format_timecode(seconds)} must be strictly before "
                f"end time {format_timecode(cue.end_time)}"
            )
        if field == "end" and seconds <= cue.start_time:
            raise ValidationError(
                f"End time {format_timecode(seconds)} must be strictly after "
                f"start time {format_timecode(cue.start_time)}"
            )
        if seconds < 0:
            raise ValidationError(f"Time cannot be negative: {seconds}")

        if field == "start":
            cue.start_time = seconds
        else:
            cue.end_time = seconds
        self._sort()

        new_index = self._position_of(cue)
        if self.overlaps(new_index):
            logger.warning(
                f"Cue at position {new_index} now overlaps a neighbouring cue"
            )
        logger.debug(f"Retimed cue {index} {field} -> {format_timecode(seconds)}")
        return new_index

    def set_text(self, index: int, text: str):
        """Replace the text of the cue at index."""
        self._check_index(index)
        self._cues[index].text = text

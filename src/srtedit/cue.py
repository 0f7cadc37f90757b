"""
Cue model for SRTEdit.
"""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass
class Cue:
    """A single subtitle entry with timing in seconds and text."""

    start_time: float
    end_time: float
    text: str = ""
    source_index: Optional[int] = None  # index as read from the SRT, diagnostics only

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def has_valid_timing(self) -> bool:
        """True if the cue ends strictly after it starts."""
        return self.end_time > self.start_time

    def contains(self, position: float) -> bool:
        """Check whether a playback position falls inside [start, end)."""
        if position is None or math.isnan(position):
            return False
        return self.start_time <= position < self.end_time

    def copy(self) -> "Cue":
        return Cue(self.start_time, self.end_time, self.text, self.source_index)

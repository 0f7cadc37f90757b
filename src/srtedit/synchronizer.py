"""
Playback synchronization module for SRTEdit.

Maps the playback position to the cue that should be highlighted
and reports when the highlighted cue changes.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from .cue import Cue
from .utils import get_logger

logger = get_logger(__name__)


@dataclass
class Transition:
    """
    Result of one synchronizer update.

    Attributes:
        previous: Active index before the update (None if no cue was active)
        current: Active index after the update (None if playback is in a gap)
        changed: True if the active cue changed
        reassert: True if the caller should bring the active cue into view,
            either because it changed or because playback jumped
    """

    previous: Optional[int]
    current: Optional[int]
    changed: bool
    reassert: bool

    @property
    def deactivated(self) -> Optional[int]:
        """Index that lost its highlight, if any."""
        return self.previous if self.changed else None

    @property
    def activated(self) -> Optional[int]:
        """Index that gained the highlight, if any."""
        return self.current if self.changed else None


def find_active_index(cues: List[Cue], position: float) -> Optional[int]:
    """
    Find the first cue whose [start, end) interval contains position.

    On overlapping cues the first match in sequence order wins.
    """
    if position is None or math.isnan(position):
        return None
    for i, cue in enumerate(cues):
        if cue.start_time <= position < cue.end_time:
            return i
    return None


class CueSynchronizer:
    """Tracks which cue is active for the current playback position."""

    def __init__(self, store):
        """
        Initialize the synchronizer.

        Args:
            store: CueStore whose sequence is followed
        """
        self.store = store
        self.active_index: Optional[int] = None

    def reset(self):
        """Forget the active cue (indices are stale after any edit)."""
        self.active_index = None

    def update(self, position: float, jumped: bool = False) -> Transition:
        """
        Recompute the active cue for a playback position.

        Args:
            position: Current playback position in seconds
            jumped: True for seeks, which always ask the caller to reassert
                the active cue even if it did not change

        Returns:
            Transition describing what changed
        """
        previous = self.active_index
        current = find_active_index(self.store.cues, position)
        changed = current != previous

        if changed:
            logger.debug(f"Active cue {previous} -> {current} at {position}s")
            self.active_index = current

        return Transition(
            previous=previous,
            current=current,
            changed=changed,
            reassert=changed or jumped,
        )

"""
Caption track binding for SRTEdit.

Follows the preview track through its lifecycle:
UNATTACHED -> ATTACHING -> ACTIVE -> DETACHED. A track only becomes
ACTIVE when the player confirms the most recent attach.
"""

from enum import Enum
from typing import Optional

from .utils import TrackError, get_logger

logger = get_logger(__name__)


class TrackState(Enum):
    UNATTACHED = "unattached"
    ATTACHING = "attaching"
    ACTIVE = "active"
    DETACHED = "detached"


class CaptionTrack:
    """Holds the current caption track text and its attachment state."""

    def __init__(self, label: str = "Edited subtitles", language: str = "en"):
        self.label = label
        self.language = language
        self.state = TrackState.UNATTACHED
        self.text: Optional[str] = None
        self.generation = 0

    @property
    def is_showing(self) -> bool:
        return self.state is TrackState.ACTIVE

    def attach(self, text: str) -> int:
        """
        Start attaching new track content.

        Args:
            text: WebVTT text

        Returns:
            Generation number to pass to confirm()

        Raises:
            TrackError: If the text contains no cues
        """
        self.generation += 1
        if not text or "-->" not in text:
            self.state = TrackState.DETACHED
            self.text = None
            raise TrackError("Caption track has no cues to display")

        self.text = text
        self.state = TrackState.ATTACHING
        logger.debug(f"Attaching caption track generation {self.generation}")
        return self.generation

    def confirm(self, generation: int) -> bool:
        """
        Mark the track as registered by the player.

        Confirmations for an older attach are ignored.

        Returns:
            True if the track became active
        """
        if self.state is not TrackState.ATTACHING or generation != self.generation:
            logger.debug(f"Ignoring stale track confirmation {generation}")
            return False
        self.state = TrackState.ACTIVE
        logger.debug(f"Caption track generation {generation} active")
        return True

    def detach(self):
        """Remove the track content."""
        self.text = None
        self.state = TrackState.DETACHED

"""Playback status values and the labels shown for each"""

from dataclasses import dataclass
from enum import Enum, auto

LABEL_READY = "Ready to Play"
LABEL_BUFFERING = "Buffering..."
LABEL_PLAYING = "Playing"
LABEL_PAUSED = "Paused"
LABEL_ERROR_PLAYING = "Error playing"
LABEL_ERROR_LOADING = "Error loading"

BUTTON_PLAY = "Play"
BUTTON_STOP = "Stop"


class PlaybackStatus(Enum):
  IDLE = auto()
  BUFFERING = auto()
  PLAYING = auto()
  PAUSED = auto()
  ERROR = auto()


@dataclass(frozen=True)
class PlaybackSnapshot:
  status: PlaybackStatus
  status_label: str
  toggle_label: str
  stream_url: str
  generation: int

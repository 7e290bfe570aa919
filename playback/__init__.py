"""Single-stream playback toggle"""

from .controller import STREAM_AUDIO_ATTRIBUTES, PlaybackController
from .state import PlaybackSnapshot, PlaybackStatus

__all__ = [
  "PlaybackController",
  "PlaybackSnapshot",
  "PlaybackStatus",
  "STREAM_AUDIO_ATTRIBUTES",
]

"""
Mock audio player for testing and headless development
"""

import logging
from typing import List, Optional

from .base import AudioAttributes, AudioPlayer, ErrorListener, PreparedListener

logger = logging.getLogger(__name__)


class MockAudioPlayer(AudioPlayer):
  """Records every call; prepared/error callbacks are fired by the caller

  With `auto_prepare=True` the prepared listener fires straight from
  `prepare_async`, which is what the `mock` audio backend uses.
  """

  def __init__(self, auto_prepare: bool = False):
    self.auto_prepare = auto_prepare
    self.calls: List[str] = []
    self.attributes: Optional[AudioAttributes] = None
    self.source: Optional[str] = None
    self.playing = False
    self.released = False
    self._on_prepared: Optional[PreparedListener] = None
    self._on_error: Optional[ErrorListener] = None

  def _record(self, name: str) -> None:
    if self.released:
      raise RuntimeError(f"{name}() called on a released player")
    self.calls.append(name)

  def set_audio_attributes(self, attributes: AudioAttributes) -> None:
    self._record("set_audio_attributes")
    self.attributes = attributes

  def set_source(self, url: str) -> None:
    self._record("set_source")
    self.source = url

  def prepare_async(self) -> None:
    self._record("prepare_async")
    if self.auto_prepare:
      self.fire_prepared()

  def start(self) -> None:
    self._record("start")
    self.playing = True

  def pause(self) -> None:
    self._record("pause")
    self.playing = False

  def release(self) -> None:
    self._record("release")
    self.playing = False
    self.released = True

  def set_on_prepared_listener(self, listener: Optional[PreparedListener]) -> None:
    self._on_prepared = listener

  def set_on_error_listener(self, listener: Optional[ErrorListener]) -> None:
    self._on_error = listener

  # ---- test helpers ----
  def fire_prepared(self) -> None:
    logger.debug("Mock player prepared")
    if self._on_prepared:
      self._on_prepared()

  def fire_error(self, what: int = 1, extra: int = 0) -> None:
    logger.debug(f"Mock player error what={what} extra={extra}")
    if self._on_error:
      self._on_error(what, extra)


class AutoPreparingMockPlayer(MockAudioPlayer):
  """Mock backend for dev runs without an audio stack"""

  def __init__(self):
    super().__init__(auto_prepare=True)

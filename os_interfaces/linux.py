"""Linux-specific implementations of OS interfaces"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import vlc

from .base import (
  AudioAttributes,
  AudioPlayer,
  ContentType,
  ErrorListener,
  PreparedListener,
)

logger = logging.getLogger(__name__)

# How long libVLC may spend probing the stream before reporting a timeout
PREPARE_TIMEOUT_MS = 15_000

# Error codes handed to the error listener
ERROR_PREPARE_FAILED = 1
ERROR_PREPARE_TIMEOUT = 2
ERROR_PLAYBACK = 100


class VlcAudioPlayer(AudioPlayer):
  """Audio player backed by libVLC through python-vlc

  Preparing maps to an asynchronous network preparse of the media.

  libVLC fires events on its own thread and must not be called back into from
  there: `stop()` or `parse_stop()` inside an event handler deadlocks. Event
  handlers therefore only read the event and queue the listener call on
  `events`, a single worker thread, so listeners see events in order and may
  call any player method, `release()` included.
  """

  def __init__(self, instance_args: tuple[str, ...] = ("--no-xlib", "--no-video")):
    self.instance = vlc.Instance(*instance_args)
    if self.instance is None:
      raise OSError("Could not create a libVLC instance. Is VLC installed?")
    self.player = self.instance.media_player_new()
    self.media: Optional[vlc.Media] = None
    self.events = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vlc-events")
    self._on_prepared: Optional[PreparedListener] = None
    self._on_error: Optional[ErrorListener] = None

    self.player.event_manager().event_attach(
      vlc.EventType.MediaPlayerEncounteredError, self._on_player_error
    )

  # ---- libVLC event handlers (libVLC thread) ----
  def _on_media_parsed(self, _event) -> None:
    media = self.media
    status = media.get_parsed_status() if media is not None else None
    self._post(self._deliver_parsed, status)

  def _on_player_error(self, _event) -> None:
    logger.warning("libVLC reported a playback error")
    self._post(self._deliver_error, ERROR_PLAYBACK)

  def _post(self, fn: Callable, *args) -> None:
    try:
      self.events.submit(fn, *args)
    except RuntimeError:
      # Executor already shut down by release()
      logger.debug(f"Dropping libVLC event after release: {fn.__name__}")

  # ---- listener delivery (events thread) ----
  def _deliver_parsed(self, status) -> None:
    if status == vlc.MediaParsedStatus.done:
      logger.debug("Stream prepared")
      listener = self._on_prepared
      if listener:
        listener()
      return

    logger.warning(f"Stream preparation ended with status {status}")
    self._deliver_error(
      ERROR_PREPARE_TIMEOUT
      if status == vlc.MediaParsedStatus.timeout
      else ERROR_PREPARE_FAILED
    )

  def _deliver_error(self, code: int) -> None:
    listener = self._on_error
    if listener:
      listener(code, 0)

  # ---- AudioPlayer ----
  def set_audio_attributes(self, attributes: AudioAttributes) -> None:
    role = (
      vlc.MediaPlayerRole.Music
      if attributes.content_type is ContentType.MUSIC
      else vlc.MediaPlayerRole.Communication
    )
    self.player.set_role(role)

  def set_source(self, url: str) -> None:
    media = self.instance.media_new(url)
    if media is None:
      raise OSError(f"libVLC could not open {url}")
    self.media = media
    self.player.set_media(media)
    media.event_manager().event_attach(
      vlc.EventType.MediaParsedChanged, self._on_media_parsed
    )

  def prepare_async(self) -> None:
    if self.media is None:
      raise OSError("No source set")
    if self.media.parse_with_options(vlc.MediaParseFlag.network, PREPARE_TIMEOUT_MS) != 0:
      raise OSError("libVLC refused to prepare the stream")

  def start(self) -> None:
    if self.player.play() != 0:
      raise OSError("libVLC failed to start playback")

  def pause(self) -> None:
    self.player.set_pause(1)

  def release(self) -> None:
    """Free libVLC resources. May run on the events thread, so never joins it."""
    self._on_prepared = None
    self._on_error = None
    self.events.shutdown(wait=False, cancel_futures=True)
    self.player.stop()
    media, self.media = self.media, None
    if media is not None:
      media.parse_stop()
      media.release()
    self.player.release()
    self.instance.release()

  def set_on_prepared_listener(self, listener: Optional[PreparedListener]) -> None:
    self._on_prepared = listener

  def set_on_error_listener(self, listener: Optional[ErrorListener]) -> None:
    self._on_error = listener

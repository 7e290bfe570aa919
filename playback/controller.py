"""
Play/pause toggle over a single stream URL
Drives a platform AudioPlayer and exposes the two labels the UI shows
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from os_interfaces.base import AudioAttributes, AudioPlayer, ContentType, Usage

from .state import (
  BUTTON_PLAY,
  BUTTON_STOP,
  LABEL_BUFFERING,
  LABEL_ERROR_LOADING,
  LABEL_ERROR_PLAYING,
  LABEL_PAUSED,
  LABEL_PLAYING,
  LABEL_READY,
  PlaybackSnapshot,
  PlaybackStatus,
)

logger = logging.getLogger(__name__)

STREAM_AUDIO_ATTRIBUTES = AudioAttributes(content_type=ContentType.MUSIC, usage=Usage.MEDIA)

ChangeListener = Callable[[PlaybackSnapshot], None]


class PlaybackController:
  """
  State machine: IDLE -> BUFFERING -> PLAYING <-> PAUSED, with ERROR reachable
  from any state holding a player.

  Every player gets a new generation number. Host callbacks carry the
  generation they were registered under and are ignored once it is stale, so a
  late `prepared` from a released player never touches the current one.

  Players are detached under the lock but released after it, and change
  listeners run after it too. A host that blocks in `release()` until its own
  callbacks return can therefore never wait on a thread stuck on this lock.
  """

  def __init__(
    self,
    stream_url: str,
    player_factory: Callable[[], AudioPlayer],
    on_change: Optional[ChangeListener] = None,
  ):
    self.stream_url = stream_url
    self._player_factory = player_factory
    self._on_change = on_change

    self._lock = threading.RLock()
    self._status = PlaybackStatus.IDLE
    self._status_label = LABEL_READY
    self._toggle_label = BUTTON_PLAY
    self._player: Optional[AudioPlayer] = None
    self._generation = 0

    # Deferred work, drained when the outermost locked section exits
    self._depth = 0
    self._retired: List[AudioPlayer] = []
    self._changes: List[PlaybackSnapshot] = []

  # ----------------------------
  # Introspection
  # ----------------------------

  @property
  def status(self) -> PlaybackStatus:
    with self._lock:
      return self._status

  @property
  def has_player(self) -> bool:
    with self._lock:
      return self._player is not None

  def snapshot(self) -> PlaybackSnapshot:
    with self._lock:
      return PlaybackSnapshot(
        status=self._status,
        status_label=self._status_label,
        toggle_label=self._toggle_label,
        stream_url=self.stream_url,
        generation=self._generation,
      )

  def set_change_listener(self, listener: Optional[ChangeListener]) -> None:
    self._on_change = listener

  # ----------------------------
  # Commands
  # ----------------------------

  def toggle(self) -> PlaybackSnapshot:
    """Play when stopped, pause when playing. Never blocks on the network."""
    with self._locked():
      match self._status:
        case PlaybackStatus.IDLE | PlaybackStatus.ERROR:
          self._begin_buffering()
        case PlaybackStatus.BUFFERING:
          logger.info("Toggle while buffering, abandoning pending prepare")
          self._discard_player()
          self._set_state(PlaybackStatus.IDLE, LABEL_READY, BUTTON_PLAY)
        case PlaybackStatus.PLAYING:
          self._player.pause()
          self._set_state(PlaybackStatus.PAUSED, LABEL_PAUSED, BUTTON_PLAY)
        case PlaybackStatus.PAUSED:
          self._player.start()
          self._set_state(PlaybackStatus.PLAYING, LABEL_PLAYING, BUTTON_STOP)
      snapshot = self.snapshot()
    return snapshot

  def teardown(self) -> PlaybackSnapshot:
    """Release the player if one exists. Safe to call any number of times."""
    with self._locked():
      if self._player is not None:
        logger.info("Tearing down playback")
        self._discard_player()
      self._set_state(PlaybackStatus.IDLE, LABEL_READY, BUTTON_PLAY)
      snapshot = self.snapshot()
    return snapshot

  # ----------------------------
  # Host callbacks
  # ----------------------------

  def on_prepared(self, generation: int) -> None:
    with self._locked():
      if not self._is_current(generation, "prepared"):
        return
      if self._status is not PlaybackStatus.BUFFERING:
        logger.debug(f"Ignoring prepared callback in state {self._status.name}")
        return
      try:
        self._player.start()
      except Exception:
        logger.exception("Failed to start playback after prepare")
        self._fail(LABEL_ERROR_PLAYING)
      else:
        self._set_state(PlaybackStatus.PLAYING, LABEL_PLAYING, BUTTON_STOP)

  def on_error(self, generation: int, what: int = 0, extra: int = 0) -> None:
    with self._locked():
      if not self._is_current(generation, "error"):
        return
      logger.error(
        f"Player error what={what} extra={extra} in state {self._status.name}"
      )
      self._fail(LABEL_ERROR_PLAYING)

  # ----------------------------
  # Internals (lock held)
  # ----------------------------

  @contextmanager
  def _locked(self) -> Iterator[None]:
    """Hold the lock; on the outermost exit release retired players and notify"""
    retired: List[AudioPlayer] = []
    changes: List[PlaybackSnapshot] = []
    try:
      with self._lock:
        self._depth += 1
        try:
          yield
        finally:
          self._depth -= 1
          if self._depth == 0:
            retired, self._retired = self._retired, []
            changes, self._changes = self._changes, []
    finally:
      for player in retired:
        self._release(player)
      for snapshot in changes:
        self._notify(snapshot)

  def _begin_buffering(self) -> None:
    # A player left over from an error is never reused
    self._discard_player()

    player = self._player_factory()
    self._generation += 1
    generation = self._generation
    self._player = player

    player.set_audio_attributes(STREAM_AUDIO_ATTRIBUTES)
    player.set_on_prepared_listener(lambda: self.on_prepared(generation))
    player.set_on_error_listener(
      lambda what, extra: self.on_error(generation, what, extra)
    )

    try:
      player.set_source(self.stream_url)
      self._set_state(PlaybackStatus.BUFFERING, LABEL_BUFFERING, BUTTON_PLAY)
      player.prepare_async()
    except OSError as e:
      logger.error(f"Failed to load stream {self.stream_url}: {e}")
      self._fail(LABEL_ERROR_LOADING)
    except Exception:
      logger.exception(f"Unexpected error loading stream {self.stream_url}")
      self._fail(LABEL_ERROR_LOADING)

  def _fail(self, label: str) -> None:
    self._discard_player()
    self._set_state(PlaybackStatus.ERROR, label, BUTTON_PLAY)

  def _discard_player(self) -> None:
    player, self._player = self._player, None
    if player is None:
      return
    player.set_on_prepared_listener(None)
    player.set_on_error_listener(None)
    self._retired.append(player)

  def _is_current(self, generation: int, kind: str) -> bool:
    if self._player is None or generation != self._generation:
      logger.debug(
        f"Dropping stale {kind} callback (generation {generation}, current {self._generation})"
      )
      return False
    return True

  def _set_state(self, status: PlaybackStatus, label: str, toggle_label: str) -> None:
    if (status, label, toggle_label) == (
      self._status,
      self._status_label,
      self._toggle_label,
    ):
      return
    if status is not self._status:
      logger.info(f"Playback {self._status.name} -> {status.name}")
    self._status = status
    self._status_label = label
    self._toggle_label = toggle_label
    self._changes.append(self.snapshot())

  # ----------------------------
  # Internals (lock released)
  # ----------------------------

  def _release(self, player: AudioPlayer) -> None:
    try:
      player.release()
    except Exception:
      logger.exception("Failed to release player")

  def _notify(self, snapshot: PlaybackSnapshot) -> None:
    if self._on_change is None:
      return
    try:
      self._on_change(snapshot)
    except Exception:
      logger.exception("Playback change listener failed")

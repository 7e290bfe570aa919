"""Abstract base classes for OS-specific interfaces"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

PreparedListener = Callable[[], None]
ErrorListener = Callable[[int, int], None]


class ContentType(str, Enum):
  MUSIC = "music"
  SPEECH = "speech"


class Usage(str, Enum):
  MEDIA = "media"


@dataclass(frozen=True)
class AudioAttributes:
  content_type: ContentType = ContentType.MUSIC
  usage: Usage = Usage.MEDIA


class AudioPlayer(ABC):
  """Abstract base class for a platform media player

  Constructing an instance is the `create` step. Listeners may be invoked on a
  thread owned by the platform, not the one that called `prepare_async`.
  """

  @abstractmethod
  def set_audio_attributes(self, attributes: AudioAttributes) -> None:
    raise NotImplementedError

  @abstractmethod
  def set_source(self, url: str) -> None:
    """Bind the player to a stream URL

    Raises:
      OSError: If the source cannot be opened
    """
    raise NotImplementedError

  @abstractmethod
  def prepare_async(self) -> None:
    """Start preparing the source; completion is reported through the listeners"""
    raise NotImplementedError

  @abstractmethod
  def start(self) -> None:
    raise NotImplementedError

  @abstractmethod
  def pause(self) -> None:
    raise NotImplementedError

  @abstractmethod
  def release(self) -> None:
    """Free the native player; the instance must not be used afterwards"""
    raise NotImplementedError

  @abstractmethod
  def set_on_prepared_listener(self, listener: Optional[PreparedListener]) -> None:
    raise NotImplementedError

  @abstractmethod
  def set_on_error_listener(self, listener: Optional[ErrorListener]) -> None:
    """Register `listener(what, extra)` for preparation or playback failures"""
    raise NotImplementedError


@dataclass
class OSImplementations:
  """Bundle of platform implementations injected into entrypoints"""

  audio_player_cls: Callable[[], AudioPlayer]

  def audio_player(self) -> AudioPlayer:
    return self.audio_player_cls()

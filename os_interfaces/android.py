"""Android-specific implementations of OS interfaces."""

from __future__ import annotations

import logging
from typing import Optional

from jnius import JavaException, PythonJavaClass, autoclass, java_method  # type: ignore

from browse_tree import BrowseNode, BrowseTreeSource

from .base import (
  AudioAttributes,
  AudioPlayer,
  ContentType,
  ErrorListener,
  PreparedListener,
)

logger = logging.getLogger(__name__)


# --- PyJNIus handles ---
MediaPlayer = autoclass("android.media.MediaPlayer")
AudioAttributesJava = autoclass("android.media.AudioAttributes")
AudioAttributesBuilder = autoclass("android.media.AudioAttributes$Builder")
Bundle = autoclass("android.os.Bundle")
ArrayList = autoclass("java.util.ArrayList")
MediaItem = autoclass("android.support.v4.media.MediaBrowserCompat$MediaItem")
MediaDescriptionBuilder = autoclass(
  "android.support.v4.media.MediaDescriptionCompat$Builder"
)
BrowserRoot = autoclass("androidx.media.MediaBrowserServiceCompat$BrowserRoot")
PxfmBrowserService = autoclass("com.pxfm.app.PxfmBrowserService")


class _PreparedListener(PythonJavaClass):
  __javainterfaces__ = ["android/media/MediaPlayer$OnPreparedListener"]
  __javacontext__ = "app"

  def __init__(self, callback: PreparedListener):
    super().__init__()
    self.callback = callback

  @java_method("(Landroid/media/MediaPlayer;)V")
  def onPrepared(self, _mp):
    try:
      self.callback()
    except Exception:  # pragma: no cover - runs on the Android looper
      logger.exception("Prepared callback failed")


class _ErrorListener(PythonJavaClass):
  __javainterfaces__ = ["android/media/MediaPlayer$OnErrorListener"]
  __javacontext__ = "app"

  def __init__(self, callback: ErrorListener):
    super().__init__()
    self.callback = callback

  @java_method("(Landroid/media/MediaPlayer;II)Z")
  def onError(self, _mp, what, extra):
    try:
      self.callback(what, extra)
    except Exception:  # pragma: no cover - runs on the Android looper
      logger.exception("Error callback failed")
    # Not handled: lets MediaPlayer also raise its completion callback
    return False


def _java_attributes(attributes: AudioAttributes):
  content_type = (
    AudioAttributesJava.CONTENT_TYPE_MUSIC
    if attributes.content_type is ContentType.MUSIC
    else AudioAttributesJava.CONTENT_TYPE_SPEECH
  )
  return (
    AudioAttributesBuilder()
    .setContentType(content_type)
    .setUsage(AudioAttributesJava.USAGE_MEDIA)
    .build()
  )


class AndroidAudioPlayer(AudioPlayer):
  """Audio player using android.media.MediaPlayer via PyJNIus"""

  def __init__(self):
    self.player = MediaPlayer()
    # Strong references; PyJNIus proxies are collected otherwise
    self._prepared_proxy: Optional[_PreparedListener] = None
    self._error_proxy: Optional[_ErrorListener] = None

  def set_audio_attributes(self, attributes: AudioAttributes) -> None:
    self.player.setAudioAttributes(_java_attributes(attributes))

  def set_source(self, url: str) -> None:
    try:
      self.player.setDataSource(url)
    except JavaException as e:
      raise OSError(f"MediaPlayer could not open {url}: {e}") from e

  def prepare_async(self) -> None:
    try:
      self.player.prepareAsync()
    except JavaException as e:
      raise OSError(f"MediaPlayer refused to prepare: {e}") from e

  def start(self) -> None:
    self.player.start()

  def pause(self) -> None:
    if self.player.isPlaying():
      self.player.pause()

  def release(self) -> None:
    self.player.release()
    self._prepared_proxy = None
    self._error_proxy = None

  def set_on_prepared_listener(self, listener: Optional[PreparedListener]) -> None:
    self._prepared_proxy = _PreparedListener(listener) if listener else None
    self.player.setOnPreparedListener(self._prepared_proxy)

  def set_on_error_listener(self, listener: Optional[ErrorListener]) -> None:
    self._error_proxy = _ErrorListener(listener) if listener else None
    self.player.setOnErrorListener(self._error_proxy)


def _bundle(extras: dict[str, int]):
  bundle = Bundle()
  for key, value in extras.items():
    bundle.putInt(key, value)
  return bundle


def build_media_item(node: BrowseNode):
  """Convert a BrowseNode into a MediaBrowserCompat.MediaItem

  The icon reference is left unset; hosts show the default artwork.
  """
  builder = (
    MediaDescriptionBuilder()
    .setMediaId(node.id)
    .setTitle(node.title)
    .setSubtitle(node.subtitle)
  )
  extras = node.content_style_extras()
  if extras:
    builder = builder.setExtras(_bundle(extras))

  flag = MediaItem.FLAG_BROWSABLE if node.browsable else MediaItem.FLAG_PLAYABLE
  return MediaItem(builder.build(), flag)


class AndroidBrowseAdapter:
  """Bridges MediaBrowserServiceCompat callbacks to a BrowseTreeSource

  The Java service shim forwards `onGetRoot` and `onLoadChildren` here.
  """

  def __init__(self, source: BrowseTreeSource):
    self.source = source

  def on_get_root(self, client_package_name: str, client_uid: int, _root_hints=None):
    root = self.source.resolve_root(f"{client_package_name}:{client_uid}")
    return BrowserRoot(root.root_id, _bundle(root.extras))

  def on_load_children(self, parent_id: str, result) -> None:
    items = ArrayList()
    for node in self.source.list_children(parent_id):
      items.add(build_media_item(node))
    logger.info(f"Sending {items.size()} children for {parent_id}")
    result.sendResult(items)


class _BrowseCallbacks(PythonJavaClass):
  """Java-side face of AndroidBrowseAdapter for PxfmBrowserService"""

  __javainterfaces__ = ["com/pxfm/app/PxfmBrowserService$BrowseCallbacks"]
  __javacontext__ = "app"

  def __init__(self, adapter: AndroidBrowseAdapter):
    super().__init__()
    self.adapter = adapter

  @java_method(
    "(Ljava/lang/String;ILandroid/os/Bundle;)"
    "Landroidx/media/MediaBrowserServiceCompat$BrowserRoot;"
  )
  def onGetRoot(self, client_package_name, client_uid, root_hints):
    return self.adapter.on_get_root(client_package_name, client_uid, root_hints)

  @java_method("(Ljava/lang/String;Landroidx/media/MediaBrowserServiceCompat$Result;)V")
  def onLoadChildren(self, parent_id, result):
    self.adapter.on_load_children(parent_id, result)


# Strong reference; the service only holds the Java proxy
_registered_callbacks: Optional[_BrowseCallbacks] = None


def register_browse_service(adapter: AndroidBrowseAdapter) -> None:
  """Route PxfmBrowserService callbacks to `adapter` for the life of the process"""
  global _registered_callbacks
  _registered_callbacks = _BrowseCallbacks(adapter)
  PxfmBrowserService.setCallbacks(_registered_callbacks)
  logger.info("Media browser service connected to the browse tree")

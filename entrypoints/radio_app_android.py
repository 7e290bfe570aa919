"""Android entrypoint for the packaged pxfm app.

Connects the media browser service to the browse tree, then injects the
MediaPlayer-backed audio player into the shared pywebview+backend bootstrap.
"""

from __future__ import annotations

from backend.config import browse_policy, station_catalog
from browse_tree import StaticBrowseTree
from entrypoints.radio_app_core import run_pywebview_app
from os_interfaces.android import (
  AndroidAudioPlayer,
  AndroidBrowseAdapter,
  register_browse_service,
)
from os_interfaces.base import OSImplementations


def browse_adapter() -> AndroidBrowseAdapter:
  """Adapter the PxfmBrowserService shim forwards its callbacks to"""
  return AndroidBrowseAdapter(
    StaticBrowseTree(catalog=station_catalog(), policy=browse_policy())
  )


def main() -> None:
  register_browse_service(browse_adapter())
  os_impl = OSImplementations(audio_player_cls=AndroidAudioPlayer)
  run_pywebview_app(os_impl=os_impl)


if __name__ == "__main__":
  main()

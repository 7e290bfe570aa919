"""Linux entrypoint for the pxfm player (pywebview shell + backend).

This entrypoint injects the libVLC audio player.
"""

from __future__ import annotations

from entrypoints.radio_app_core import run_pywebview_app
from os_interfaces.base import OSImplementations
from os_interfaces.linux import VlcAudioPlayer


def main() -> None:
  os_impl = OSImplementations(audio_player_cls=VlcAudioPlayer)
  run_pywebview_app(os_impl=os_impl)


if __name__ == "__main__":
  main()

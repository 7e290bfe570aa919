"""OS interface module - platform-specific implementations

Since we build separate executables for each platform,
import the appropriate implementation directly in the entry points:
- entrypoints.radio_app_linux imports from os_interfaces.linux
- entrypoints.radio_app_android imports from os_interfaces.android
"""

from .base import AudioAttributes, AudioPlayer, ContentType, OSImplementations, Usage

__all__ = [
  "AudioAttributes",
  "AudioPlayer",
  "ContentType",
  "OSImplementations",
  "Usage",
]

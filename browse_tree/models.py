"""
Browse tree data model
Nodes handed to media-browsing hosts (car displays, voice surfaces, the web UI)
"""

from enum import Enum, IntEnum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Extras keys understood by media-browsing hosts (Android Auto reads these)
CONTENT_STYLE_BROWSABLE_HINT = "android.media.browse.CONTENT_STYLE_BROWSABLE_HINT"
CONTENT_STYLE_PLAYABLE_HINT = "android.media.browse.CONTENT_STYLE_PLAYABLE_HINT"

ROOT_ID = "media_root_id"
FOLDER_ALL_STATIONS = "folder_all_stations"
FOLDER_FAVORITES = "folder_favorites"


class NodeKind(str, Enum):
  """Position of a node in the three-level tree"""

  ROOT = "root"
  FOLDER = "folder"
  STATION = "station"


class LayoutHint(IntEnum):
  """How a host should render the children of a hinted node"""

  LIST = 1
  GRID = 2

  @classmethod
  def parse(cls, value: str) -> Optional["LayoutHint"]:
    """Parse 'none' | 'list' | 'grid' (case-insensitive)"""
    normalized = value.strip().lower()
    if normalized in ("", "none"):
      return None
    try:
      return cls[normalized.upper()]
    except KeyError:
      raise ValueError(
        f"Invalid layout hint: {value!r}. Must be 'none', 'list' or 'grid'"
      ) from None


def hint_extras(hint: Optional[LayoutHint]) -> Dict[str, int]:
  """Build the host extras dict for a layout hint"""
  if hint is None:
    return {}
  return {
    CONTENT_STYLE_BROWSABLE_HINT: int(hint),
    CONTENT_STYLE_PLAYABLE_HINT: int(hint),
  }


class BrowseNode(BaseModel):
  """A point in the browse hierarchy"""

  model_config = ConfigDict(frozen=True)

  id: str
  kind: NodeKind
  title: str
  subtitle: str = ""
  layout_hint: Optional[LayoutHint] = None
  icon_ref: Optional[str] = None

  @property
  def browsable(self) -> bool:
    return self.kind is not NodeKind.STATION

  @property
  def playable(self) -> bool:
    return self.kind is NodeKind.STATION

  def content_style_extras(self) -> Dict[str, int]:
    return hint_extras(self.layout_hint)


class BrowserRoot(BaseModel):
  """Answer to a root request: the root id plus optional rendering hints"""

  model_config = ConfigDict(frozen=True)

  root_id: str = ROOT_ID
  extras: Dict[str, int] = Field(default_factory=dict)

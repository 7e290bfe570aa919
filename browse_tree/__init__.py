"""Static media browse tree"""

from .catalog import DEFAULT_CATALOG, StationCatalog, StationRecord, load_catalog
from .models import (
  FOLDER_ALL_STATIONS,
  FOLDER_FAVORITES,
  ROOT_ID,
  BrowseNode,
  BrowserRoot,
  LayoutHint,
  NodeKind,
)
from .provider import BrowsePolicy, BrowseTreeSource, StaticBrowseTree

__all__ = [
  "BrowseNode",
  "BrowsePolicy",
  "BrowseTreeSource",
  "BrowserRoot",
  "DEFAULT_CATALOG",
  "FOLDER_ALL_STATIONS",
  "FOLDER_FAVORITES",
  "LayoutHint",
  "NodeKind",
  "ROOT_ID",
  "StaticBrowseTree",
  "StationCatalog",
  "StationRecord",
  "load_catalog",
]
